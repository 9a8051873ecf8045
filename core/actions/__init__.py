from .base import Operation
from .factory import (
    create_operation,
    get_available_operation_types,
    OPERATION_REGISTRY
)
from .key_ops import GetKeyOperation, KeyExistsOperation, NewKeyOperation, RemoveKeyOperation
from .value_ops import (
    GetValueOperation,
    RemoveValueOperation,
    SetValueOperation,
    ValueExistsOperation,
)

__all__ = [
    'Operation',
    'create_operation',
    'get_available_operation_types',
    'OPERATION_REGISTRY',
    'KeyExistsOperation',
    'GetKeyOperation',
    'NewKeyOperation',
    'RemoveKeyOperation',
    'ValueExistsOperation',
    'GetValueOperation',
    'SetValueOperation',
    'RemoveValueOperation',
]
