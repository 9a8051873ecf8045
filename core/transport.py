from typing import Any, List, Optional, Protocol, Tuple

from .registry import HiveRoot

Handle = Any


class RegistryTransport(Protocol):
    """
    Capability set a remote registry backend must provide.

    Failures surface as ``OSError`` subclasses, the way ``winreg`` reports
    them: ``FileNotFoundError`` for absent keys/values, ``PermissionError``
    for denied access, plain ``OSError`` for everything else.
    """

    def open_hive(self, host: Optional[str], hive: HiveRoot) -> Handle:
        ...

    def open_key(self, handle: Handle, path: str, writable: bool) -> Optional[Handle]:
        """Returns None when ``path`` does not exist."""
        ...

    def create_key(self, handle: Handle, name: str) -> Handle:
        ...

    def delete_key(self, handle: Handle, path: str, recursive: bool) -> None:
        ...

    def enum_keys(self, handle: Handle) -> List[str]:
        ...

    def enum_values(self, handle: Handle) -> List[Tuple[str, Any, int]]:
        ...

    def get_value(self, handle: Handle, name: str) -> Optional[Tuple[Any, int]]:
        """Returns ``(data, type_code)`` or None when the value is absent."""
        ...

    def set_value(self, handle: Handle, name: str, data: Any, type_code: int) -> None:
        ...

    def delete_value(self, handle: Handle, name: str) -> None:
        ...

    def close(self, handle: Handle) -> None:
        ...
