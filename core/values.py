from fnmatch import fnmatchcase
from typing import List, Optional

from .connection import KeyHandle, access_errors
from .errors import AccessError, InvalidDataError, NotFoundError
from .records import RegistryValueRecord
from .registry import (
    MULTI_STRING_SEPARATOR,
    RegistryData,
    ValueType,
    coerce_data,
    display_value_name,
    is_default_value,
    store_value_name,
)


def _record(key: KeyHandle, name: Optional[str], data: RegistryData, value_type: ValueType) -> RegistryValueRecord:
    conn = key.connection
    return RegistryValueRecord(
        conn.host.name, conn.hive, key.path, display_value_name(name), data, value_type
    )


def _query(key: KeyHandle, name: Optional[str]):
    with access_errors(f"Cannot read {key.path}\\{display_value_name(name)}"):
        return key.transport.get_value(key.handle, store_value_name(name))


def get_value(key: KeyHandle, name: Optional[str]) -> RegistryValueRecord:
    """
    Read one value under ``key``, reporting the store's own type.

    The default value is never missing: when unset it reads as None data of
    type None.

    Raises:
        NotFoundError: If a named value does not exist under the key.
    """
    found = _query(key, name)
    if found is None:
        if is_default_value(name):
            return _record(key, name, None, ValueType.NONE)
        raise NotFoundError(f"Value not found: {key.path}\\{name}")

    data, code = found
    return _record(key, name, data, ValueType.from_code(code))


def check_value(key: KeyHandle, name: Optional[str], expected=None, separator: str = MULTI_STRING_SEPARATOR) -> bool:
    """
    True when the value exists (for the default value: when it holds data).

    With ``expected`` given, the stored data must also equal ``expected``
    coerced to the stored type.
    """
    found = _query(key, name)
    if found is None:
        return False
    if expected is None:
        return True

    data, code = found
    try:
        return data == coerce_data(expected, ValueType.from_code(code), separator)
    except InvalidDataError:
        return False


def set_value(
    key: KeyHandle,
    name: Optional[str],
    data,
    value_type: ValueType,
    separator: str = MULTI_STRING_SEPARATOR,
) -> RegistryValueRecord:
    """
    Write ``data`` as ``value_type``, replacing any existing data and type.

    Coercion happens before the store is touched, so invalid data never
    mutates the key.
    """
    coerced = coerce_data(data, value_type, separator)

    if not key.writable:
        raise AccessError(f"Key {key.path} is not open for writing")

    with access_errors(f"Cannot write {key.path}\\{display_value_name(name)}"):
        key.transport.set_value(key.handle, store_value_name(name), coerced, value_type.value)
    return _record(key, name, coerced, value_type)


def delete_value(key: KeyHandle, name: Optional[str]) -> RegistryValueRecord:
    """Delete a value; returns its last record. Raises NotFoundError when absent."""
    found = _query(key, name)
    if found is None:
        raise NotFoundError(f"Value not found: {key.path}\\{display_value_name(name)}")

    with access_errors(f"Cannot delete {key.path}\\{display_value_name(name)}"):
        key.transport.delete_value(key.handle, store_value_name(name))

    data, code = found
    return _record(key, name, data, ValueType.from_code(code))


def list_values(
    key: KeyHandle,
    pattern: Optional[str] = None,
    value_type: Optional[ValueType] = None,
) -> List[RegistryValueRecord]:
    with access_errors(f"Cannot enumerate {key.path}"):
        entries = key.transport.enum_values(key.handle)

    records = []
    for name, data, code in entries:
        vtype = ValueType.from_code(code)
        if value_type is not None and vtype is not value_type:
            continue
        if pattern is not None and not fnmatchcase(display_value_name(name).lower(), pattern.lower()):
            continue
        records.append(_record(key, name, data, vtype))
    return records
