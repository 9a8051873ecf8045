from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from ..connection import KeyHandle
from ..errors import NotFoundError
from ..registry import MULTI_STRING_SEPARATOR, join_key_path, split_key_path


class Operation(ABC):
    """
    One registry operation, run by the orchestrator once per host.

    The orchestrator opens ``target()`` under the hive and hands the key to
    ``execute``; subclasses supply only that step.
    """

    mutating = False
    writable = False
    # Reads always produce records, whatever the detailed flag says.
    always_detailed = False
    # Result reported when the target key is absent; None means NotFound.
    missing_key_result: Optional[bool] = None

    def __init__(self, definition: Dict[str, Any]) -> None:
        self.definition = definition
        self.operation_type: str = definition["type"]
        self.key: str = join_key_path(split_key_path(definition.get("key") or ""))
        self.separator: str = definition.get("separator") or MULTI_STRING_SEPARATOR

    def target(self) -> Tuple[str, ...]:
        return split_key_path(self.key)

    def on_missing_key(self) -> Any:
        if self.missing_key_result is None:
            raise NotFoundError(f"Key not found: {join_key_path(self.target())}")
        return self.missing_key_result

    @abstractmethod
    def execute(self, key: KeyHandle) -> Any:
        pass

    def get_description(self) -> str:
        return f"{self.operation_type} {self.key}"
