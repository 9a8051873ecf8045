from typing import Any, Dict

from .base import Operation
from ..connection import KeyHandle
from ..registry import display_value_name, parse_value_type
from .. import values


class ValueOperation(Operation):

    def __init__(self, definition: Dict[str, Any]) -> None:
        super().__init__(definition)
        self.value_name = definition.get("value")


class ValueExistsOperation(ValueOperation):
    missing_key_result = False

    def __init__(self, definition: Dict[str, Any]) -> None:
        super().__init__(definition)
        self.expected = definition.get("data")

    def execute(self, key: KeyHandle):
        if not values.check_value(key, self.value_name, self.expected, self.separator):
            return False
        return values.get_value(key, self.value_name)

    def get_description(self) -> str:
        return f"Test value {self.key}\\{display_value_name(self.value_name)}"


class GetValueOperation(ValueOperation):
    always_detailed = True

    def __init__(self, definition: Dict[str, Any]) -> None:
        super().__init__(definition)
        self.pattern = definition.get("name")
        type_filter = definition.get("value_type")
        self.type_filter = parse_value_type(type_filter) if type_filter else None

    def execute(self, key: KeyHandle):
        if self.value_name is None:
            return values.list_values(key, self.pattern, self.type_filter)
        return values.get_value(key, self.value_name)

    def get_description(self) -> str:
        if self.value_name is None:
            return f"List values of {self.key}"
        return f"Get value {self.key}\\{display_value_name(self.value_name)}"


class SetValueOperation(ValueOperation):
    mutating = True
    writable = True

    def __init__(self, definition: Dict[str, Any]) -> None:
        super().__init__(definition)
        if "data" not in definition:
            raise ValueError("set-value requires data")
        self.data = definition["data"]
        self.value_type = parse_value_type(definition.get("value_type") or "String")

    def execute(self, key: KeyHandle):
        return values.set_value(key, self.value_name, self.data, self.value_type, self.separator)

    def get_description(self) -> str:
        return (
            f"Set value {self.key}\\{display_value_name(self.value_name)} = "
            f"{self.data!r} ({self.value_type.display_name})"
        )


class RemoveValueOperation(ValueOperation):
    mutating = True
    writable = True

    def execute(self, key: KeyHandle):
        return values.delete_value(key, self.value_name)

    def get_description(self) -> str:
        return f"Remove value {self.key}\\{display_value_name(self.value_name)}"
