import logging
import winreg
from typing import Any, List, Optional, Tuple

from .registry import HiveRoot

logger = logging.getLogger(__name__)


class WinRegTransport:
    """Remote registry backend over the standard library ``winreg`` module."""

    def open_hive(self, host: Optional[str], hive: HiveRoot) -> winreg.HKEYType:
        # ConnectRegistry(None, ...) binds the local registry without RPC.
        return winreg.ConnectRegistry(host, hive.value)

    def open_key(self, handle, path: str, writable: bool) -> Optional[winreg.HKEYType]:
        access = winreg.KEY_READ
        if writable:
            access |= winreg.KEY_WRITE
        try:
            return winreg.OpenKey(handle, path, 0, access)
        except FileNotFoundError:
            return None

    def create_key(self, handle, name: str) -> winreg.HKEYType:
        return winreg.CreateKeyEx(handle, name, 0, winreg.KEY_READ | winreg.KEY_WRITE)

    def delete_key(self, handle, path: str, recursive: bool) -> None:
        if recursive:
            sub = winreg.OpenKey(handle, path, 0, winreg.KEY_ALL_ACCESS)
            try:
                for child in self.enum_keys(sub):
                    self.delete_key(sub, child, recursive=True)
            finally:
                winreg.CloseKey(sub)
        logger.debug("DeleteKey %s", path)
        winreg.DeleteKey(handle, path)

    def enum_keys(self, handle) -> List[str]:
        count = winreg.QueryInfoKey(handle)[0]
        return [winreg.EnumKey(handle, i) for i in range(count)]

    def enum_values(self, handle) -> List[Tuple[str, Any, int]]:
        count = winreg.QueryInfoKey(handle)[1]
        return [winreg.EnumValue(handle, i) for i in range(count)]

    def get_value(self, handle, name: str) -> Optional[Tuple[Any, int]]:
        try:
            return winreg.QueryValueEx(handle, name)
        except FileNotFoundError:
            return None

    def set_value(self, handle, name: str, data: Any, type_code: int) -> None:
        winreg.SetValueEx(handle, name, 0, type_code, data)

    def delete_value(self, handle, name: str) -> None:
        winreg.DeleteValue(handle, name)

    def close(self, handle) -> None:
        winreg.CloseKey(handle)
