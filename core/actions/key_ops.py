from typing import Any, Dict, Tuple

from .base import Operation
from ..connection import KeyHandle
from ..errors import AccessError
from .. import keys


class KeyExistsOperation(Operation):
    missing_key_result = False

    def execute(self, key: KeyHandle):
        return keys.key_record(key)

    def get_description(self) -> str:
        return f"Test key {self.key}"


class GetKeyOperation(Operation):
    always_detailed = True

    def __init__(self, definition: Dict[str, Any]) -> None:
        super().__init__(definition)
        self.pattern = definition.get("name")
        self.recursive = bool(definition.get("recursive", False))

    def execute(self, key: KeyHandle):
        return keys.find(key, self.pattern, self.recursive)

    def get_description(self) -> str:
        return f"List subkeys of {self.key}"


class NewKeyOperation(Operation):
    mutating = True
    writable = True

    def __init__(self, definition: Dict[str, Any]) -> None:
        super().__init__(definition)
        name = definition.get("name")
        if not name:
            # "Parent\\Child" given as a single path
            segments = self.target()
            if not segments:
                raise ValueError("new-key requires a key path or a subkey name")
            self.key, name = "\\".join(segments[:-1]), segments[-1]
        self.name: str = name

    def execute(self, key: KeyHandle):
        return keys.create(key, self.name)

    def get_description(self) -> str:
        return f"Create key {key_label(self.key, self.name)}"


class RemoveKeyOperation(Operation):
    mutating = True
    writable = True

    def __init__(self, definition: Dict[str, Any]) -> None:
        super().__init__(definition)
        self.recursive = bool(definition.get("recursive", False))

    def target(self) -> Tuple[str, ...]:
        return super().target()[:-1]

    def execute(self, key: KeyHandle):
        segments = super().target()
        if not segments:
            raise AccessError("Refusing to delete a hive root")
        return keys.remove_child(key, segments[-1], self.recursive)

    def get_description(self) -> str:
        suffix = " and all of its subkeys" if self.recursive else ""
        return f"Remove key {self.key}{suffix}"


def key_label(parent: str, name: str) -> str:
    return f"{parent}\\{name}" if parent else name
