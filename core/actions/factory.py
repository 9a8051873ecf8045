from typing import Dict, Any, Type
from .base import Operation
from .key_ops import GetKeyOperation, KeyExistsOperation, NewKeyOperation, RemoveKeyOperation
from .value_ops import GetValueOperation, RemoveValueOperation, SetValueOperation, ValueExistsOperation


# Registry of all available operation types
OPERATION_REGISTRY: Dict[str, Type[Operation]] = {
    "test-key": KeyExistsOperation,
    "get-key": GetKeyOperation,
    "new-key": NewKeyOperation,
    "remove-key": RemoveKeyOperation,
    "test-value": ValueExistsOperation,
    "get-value": GetValueOperation,
    "set-value": SetValueOperation,
    "remove-value": RemoveValueOperation,
}


def create_operation(definition: Dict[str, Any]) -> Operation:
    operation_type = definition.get("type")

    if not operation_type:
        raise ValueError("Operation definition missing 'type' field")

    operation_class = OPERATION_REGISTRY.get(operation_type)

    if not operation_class:
        available = ", ".join(OPERATION_REGISTRY.keys())
        raise ValueError(
            f"Unknown operation type: '{operation_type}'. "
            f"Available types: {available}"
        )

    return operation_class(definition)


def get_available_operation_types() -> list:
    return list(OPERATION_REGISTRY.keys())
