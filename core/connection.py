import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Union

from .errors import AccessError, ConnectError, NotFoundError
from .host import HostIdentity
from .registry import HiveRoot, join_key_path, split_key_path
from .transport import Handle, RegistryTransport

logger = logging.getLogger(__name__)


@contextmanager
def access_errors(action: str) -> Iterator[None]:
    """Translate transport ``OSError``s raised inside the block."""
    try:
        yield
    except FileNotFoundError as e:
        raise NotFoundError(f"{action}: {e.strerror or e}") from e
    except OSError as e:
        raise AccessError(f"{action}: {e.strerror or e}") from e


class StoreConnection:
    """An open hive on one host. Released on every exit path via ``with``."""

    def __init__(self, transport: RegistryTransport, host: HostIdentity, hive: HiveRoot) -> None:
        self.transport = transport
        self.host = host
        self.hive = hive
        self.handle: Optional[Handle] = None

    def open(self) -> "StoreConnection":
        try:
            self.handle = self.transport.open_hive(self.host.transport_name, self.hive)
        except OSError as e:
            raise ConnectError(
                f"Cannot open {self.hive.long_name} on {self.host}: {e.strerror or e}"
            ) from e
        logger.debug("connected %s\\%s", self.host, self.hive.long_name)
        return self

    def close(self) -> None:
        if self.handle is None:
            return
        handle, self.handle = self.handle, None
        try:
            self.transport.close(handle)
        except OSError as e:
            logger.warning("close %s\\%s failed: %s", self.host, self.hive.long_name, e)
        logger.debug("released %s\\%s", self.host, self.hive.long_name)

    def __enter__(self) -> "StoreConnection":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class KeyHandle:

    def __init__(
        self,
        connection: StoreConnection,
        handle: Handle,
        segments: Sequence[str],
        writable: bool,
        owned: bool = True,
    ) -> None:
        self.connection = connection
        self.handle = handle
        self.segments = tuple(segments)
        self.writable = writable
        self._owned = owned

    @property
    def transport(self) -> RegistryTransport:
        return self.connection.transport

    @property
    def path(self) -> str:
        return join_key_path(self.segments)

    @property
    def name(self) -> str:
        return self.segments[-1] if self.segments else ""

    def child_path(self, name: str) -> str:
        return join_key_path(self.segments + split_key_path(name))

    def close(self) -> None:
        if self.handle is None:
            return
        handle, self.handle = self.handle, None
        # The hive root handle belongs to the connection.
        if self._owned:
            self.transport.close(handle)

    def __enter__(self) -> "KeyHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class KeyNavigator:

    def __init__(self, connection: StoreConnection) -> None:
        self.connection = connection

    def open(self, path: Union[None, str, Sequence[str]], writable: bool = False) -> Optional[KeyHandle]:
        """
        Resolve ``path`` under the connection's hive.

        Returns:
            An open KeyHandle, or None when the path does not exist.

        Raises:
            AccessError: On permission or protocol failure.
        """
        segments = split_key_path(path)
        conn = self.connection

        if not segments:
            return KeyHandle(conn, conn.handle, segments, writable, owned=False)

        try:
            handle = conn.transport.open_key(conn.handle, join_key_path(segments), writable)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise AccessError(
                f"Cannot open {conn.hive.long_name}\\{join_key_path(segments)} on {conn.host}: "
                f"{e.strerror or e}"
            ) from e

        if handle is None:
            return None
        return KeyHandle(conn, handle, segments, writable)

    def require(self, path: Union[None, str, Sequence[str]], writable: bool = False) -> KeyHandle:
        key = self.open(path, writable)
        if key is None:
            conn = self.connection
            raise NotFoundError(
                f"Key not found: {conn.hive.long_name}\\{join_key_path(split_key_path(path))} on {conn.host}"
            )
        return key
