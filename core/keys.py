from fnmatch import fnmatchcase
from typing import Dict, List, Optional, Sequence, Union

from .connection import KeyHandle, KeyNavigator, StoreConnection, access_errors
from .errors import AccessError, InvalidDataError, NotEmptyError
from .records import RegistryKeyRecord
from .registry import display_value_name, join_key_path, split_key_path


def key_record(key: KeyHandle) -> RegistryKeyRecord:
    with access_errors(f"Cannot query {key.path}"):
        subkeys = key.transport.enum_keys(key.handle)
        values = key.transport.enum_values(key.handle)

    conn = key.connection
    return RegistryKeyRecord(conn.host.name, conn.hive, key.path, len(subkeys), len(values))


def exists(connection: StoreConnection, path: Union[str, Sequence[str]]) -> bool:
    key = KeyNavigator(connection).open(path)
    if key is None:
        return False
    key.close()
    return True


def create(parent: KeyHandle, name: str) -> RegistryKeyRecord:
    """
    Create ``name`` under ``parent``, or open it when it already exists.

    ``name`` may span several levels; missing intermediate keys are created.
    """
    segments = split_key_path(name)
    if not segments:
        raise InvalidDataError("Key name cannot be empty")

    path = parent.child_path(name)
    with access_errors(f"Cannot create {path}"):
        handle = parent.transport.create_key(parent.handle, join_key_path(segments))

    with KeyHandle(parent.connection, handle, parent.segments + segments, writable=True) as child:
        return key_record(child)


def remove_child(parent: KeyHandle, name: str, recursive: bool = False) -> RegistryKeyRecord:
    """
    Delete the subkey ``name`` of ``parent``.

    Returns the record of the key as it was just before deletion.

    Raises:
        NotFoundError: If the subkey does not exist.
        NotEmptyError: If it has subkeys and ``recursive`` is False.
    """
    nav = KeyNavigator(parent.connection)
    path = parent.child_path(name)

    with nav.require(path) as target:
        record = key_record(target)

    if record.subkey_count and not recursive:
        raise NotEmptyError(
            f"Key {path} has {record.subkey_count} subkey(s); use recursive removal"
        )

    with access_errors(f"Cannot delete {path}"):
        parent.transport.delete_key(parent.handle, join_key_path(split_key_path(name)), recursive)
    return record


def remove(connection: StoreConnection, path: Union[str, Sequence[str]], recursive: bool = False) -> RegistryKeyRecord:
    segments = split_key_path(path)
    if not segments:
        raise AccessError(f"Refusing to delete the {connection.hive.long_name} hive root")

    with KeyNavigator(connection).require(segments[:-1], writable=True) as parent:
        return remove_child(parent, segments[-1], recursive)


def enumerate_key(key: KeyHandle) -> Dict[str, List[str]]:
    """Point-in-time listing of subkey names and value names under ``key``."""
    with access_errors(f"Cannot enumerate {key.path}"):
        subkeys = list(key.transport.enum_keys(key.handle))
        values = [display_value_name(v[0]) for v in key.transport.enum_values(key.handle)]
    return {"subkeys": subkeys, "values": values}


def find(key: KeyHandle, pattern: Optional[str] = None, recursive: bool = False) -> List[RegistryKeyRecord]:
    """Records of the subkeys of ``key`` whose name matches ``pattern``."""
    nav = KeyNavigator(key.connection)
    found: List[RegistryKeyRecord] = []

    for name in enumerate_key(key)["subkeys"]:
        child = nav.open(key.segments + (name,))
        # Deleted between listing and opening.
        if child is None:
            continue
        with child:
            if pattern is None or fnmatchcase(name.lower(), pattern.lower()):
                found.append(key_record(child))
            if recursive:
                found.extend(find(child, pattern, recursive=True))
    return found
