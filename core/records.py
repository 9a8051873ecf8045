from typing import Any, Dict

from .registry import HiveRoot, RegistryData, ValueType


class RegistryValueRecord:

    def __init__(
        self,
        host: str,
        hive: HiveRoot,
        key: str,
        value: str,
        data: RegistryData,
        value_type: ValueType,
    ) -> None:
        self.host = host
        self.hive = hive
        self.key = key
        self.value = value
        self.data = data
        self.value_type = value_type

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "hive": self.hive.display_name,
            "key": self.key,
            "value": self.value,
            "data": self.data,
            "type": self.value_type.display_name,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, RegistryValueRecord):
            return False
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"RegistryValueRecord({self.host}\\{self.hive.long_name}\\{self.key}"
            f" {self.value}={self.data!r} [{self.value_type.display_name}])"
        )


class RegistryKeyRecord:

    def __init__(
        self,
        host: str,
        hive: HiveRoot,
        key: str,
        subkey_count: int,
        value_count: int,
    ) -> None:
        self.host = host
        self.hive = hive
        self.key = key
        self.subkey_count = subkey_count
        self.value_count = value_count

    @property
    def name(self) -> str:
        return self.key.rsplit("\\", 1)[-1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "hive": self.hive.display_name,
            "key": self.key,
            "name": self.name,
            "subkey_count": self.subkey_count,
            "value_count": self.value_count,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, RegistryKeyRecord):
            return False
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"RegistryKeyRecord({self.host}\\{self.hive.long_name}\\{self.key}"
            f" subkeys={self.subkey_count} values={self.value_count})"
        )
