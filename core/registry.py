import re
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .errors import InvalidDataError


class HiveRoot(Enum):
    CLASSES_ROOT = 0x80000000
    CURRENT_USER = 0x80000001
    LOCAL_MACHINE = 0x80000002
    USERS = 0x80000003
    PERFORMANCE_DATA = 0x80000004
    CURRENT_CONFIG = 0x80000005
    DYN_DATA = 0x80000006

    @property
    def long_name(self) -> str:
        return "HKEY_" + self.name

    @property
    def display_name(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


HIVE_ALIASES: Dict[str, HiveRoot] = {
    "HKCR": HiveRoot.CLASSES_ROOT,
    "HKCU": HiveRoot.CURRENT_USER,
    "HKLM": HiveRoot.LOCAL_MACHINE,
    "HKU": HiveRoot.USERS,
    "HKPD": HiveRoot.PERFORMANCE_DATA,
    "HKCC": HiveRoot.CURRENT_CONFIG,
    "HKDD": HiveRoot.DYN_DATA,
}


class ValueType(Enum):
    """Registry value types, keyed by their on-the-wire type code."""

    NONE = 0
    STRING = 1
    EXPAND_STRING = 2
    BINARY = 3
    DWORD = 4
    MULTI_STRING = 7
    QWORD = 11
    UNKNOWN = -1

    @classmethod
    def from_code(cls, code: Optional[int]) -> "ValueType":
        if code is None:
            return cls.NONE
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    @property
    def display_name(self) -> str:
        return _VALUE_TYPE_NAMES[self]


_VALUE_TYPE_NAMES: Dict[ValueType, str] = {
    ValueType.NONE: "None",
    ValueType.STRING: "String",
    ValueType.EXPAND_STRING: "ExpandString",
    ValueType.BINARY: "Binary",
    ValueType.DWORD: "DWord",
    ValueType.MULTI_STRING: "MultiString",
    ValueType.QWORD: "QWord",
    ValueType.UNKNOWN: "Unknown",
}

VALUE_TYPES: Dict[str, ValueType] = {
    "STRING": ValueType.STRING,
    "SZ": ValueType.STRING,
    "EXPANDSTRING": ValueType.EXPAND_STRING,
    "EXPAND_SZ": ValueType.EXPAND_STRING,
    "MULTISTRING": ValueType.MULTI_STRING,
    "MULTI_SZ": ValueType.MULTI_STRING,
    "DWORD": ValueType.DWORD,
    "QWORD": ValueType.QWORD,
    "BINARY": ValueType.BINARY,
    "NONE": ValueType.NONE,
}

DEFAULT_VALUE_NAME = "(default)"
MULTI_STRING_SEPARATOR = "\n"

_UINT_LIMITS = {
    ValueType.DWORD: 0xFFFFFFFF,
    ValueType.QWORD: 0xFFFFFFFFFFFFFFFF,
}
_UINT_PATTERN = re.compile(r"^(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<dec>[0-9]+))$")
_BINARY_SPLIT = re.compile(r"[\s,;:\-]+")
_PATH_SPLIT = re.compile(r"[\\/]+")

RegistryData = Union[None, int, str, bytes, List[str]]


def parse_hive(name: Union[str, HiveRoot]) -> HiveRoot:
    """
    Resolve a hive given by enum name, long Windows name or short alias.

    Raises:
        ValueError: If the name does not denote a hive.

    Example:
        >>> parse_hive("HKLM") is parse_hive("LocalMachine") is HiveRoot.LOCAL_MACHINE
        True
    """
    if isinstance(name, HiveRoot):
        return name

    token = name.strip().upper().replace("_", "")
    for hive in HiveRoot:
        if token in (hive.name.replace("_", ""), hive.long_name.replace("_", "")):
            return hive
    if token in HIVE_ALIASES:
        return HIVE_ALIASES[token]

    valid = ", ".join(h.display_name for h in HiveRoot)
    raise ValueError(f"Invalid hive: {name}. Valid hives: {valid}")


def parse_value_type(name: Union[str, ValueType]) -> ValueType:
    if isinstance(name, ValueType):
        return name

    token = name.strip().upper()
    if token.startswith("REG_"):
        token = token[4:]
    if token in VALUE_TYPES:
        return VALUE_TYPES[token]

    valid = ", ".join(sorted({t.display_name for t in VALUE_TYPES.values()}))
    raise ValueError(f"Invalid registry type: '{name}'. Valid types: {valid}")


def split_key_path(path: Union[None, str, Sequence[str]]) -> Tuple[str, ...]:
    """
    Split a delimited key path into segments.

    Both backslash and forward slash delimit; empty segments are dropped, so
    an empty path yields no segments and denotes the hive root.
    """
    if not path:
        return ()
    if isinstance(path, str):
        return tuple(s for s in _PATH_SPLIT.split(path) if s)
    return tuple(s for s in path if s)


def join_key_path(segments: Sequence[str]) -> str:
    return "\\".join(segments)


def is_default_value(name: Optional[str]) -> bool:
    return not name or name.lower() == DEFAULT_VALUE_NAME


def store_value_name(name: Optional[str]) -> str:
    """The name under which the store keeps a value; the default value is unnamed."""
    return "" if is_default_value(name) else name


def display_value_name(name: Optional[str]) -> str:
    return DEFAULT_VALUE_NAME if is_default_value(name) else name


def _coerce_uint(data, value_type: ValueType) -> int:
    limit = _UINT_LIMITS[value_type]

    if isinstance(data, bool):
        raise InvalidDataError(f"{value_type.display_name} data must be numeric, got {data!r}")
    if isinstance(data, int):
        number = data
    else:
        text = data.decode("ascii", "replace") if isinstance(data, bytes) else str(data)
        match = _UINT_PATTERN.match(text.strip())
        if not match:
            raise InvalidDataError(
                f"{value_type.display_name} data must be an unsigned integer literal, got {data!r}"
            )
        number = int(match.group("hex"), 16) if match.group("hex") else int(match.group("dec"))

    if not 0 <= number <= limit:
        raise InvalidDataError(
            f"{value_type.display_name} data out of range (0..{limit}): {number}"
        )
    return number


def _coerce_binary(data) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)

    if isinstance(data, (list, tuple)):
        try:
            return bytes(int(b) for b in data)
        except (TypeError, ValueError) as e:
            raise InvalidDataError(f"Binary data must be byte values 0..255: {e}") from e

    out = bytearray()
    for token in _BINARY_SPLIT.split(str(data).strip()):
        if not token:
            continue
        if token[:2].lower() == "0x":
            token = token[2:]
        # "1,2,3" style single digits; any other odd length is ambiguous
        if len(token) == 1:
            token = "0" + token
        elif len(token) % 2:
            raise InvalidDataError(f"Binary data must be hex byte pairs, got {token!r}")
        try:
            out.extend(bytes.fromhex(token))
        except ValueError as e:
            raise InvalidDataError(f"Binary data must be hex byte pairs, got {token!r}") from e
    return bytes(out)


def coerce_data(data, value_type: ValueType, separator: str = MULTI_STRING_SEPARATOR) -> RegistryData:
    """
    Coerce boundary data (text, bytes or native values) to the store form of
    ``value_type``.

    Raises:
        InvalidDataError: If the data cannot represent the requested type.
    """
    if value_type in _UINT_LIMITS:
        return _coerce_uint(data, value_type)

    if value_type is ValueType.MULTI_STRING:
        if isinstance(data, (list, tuple)):
            return [str(item) for item in data]
        text = str(data)
        return text.split(separator) if text else []

    if value_type is ValueType.BINARY:
        return _coerce_binary(data)

    if value_type in (ValueType.STRING, ValueType.EXPAND_STRING):
        if isinstance(data, (bytes, bytearray)):
            raise InvalidDataError(f"{value_type.display_name} data must be text")
        return "" if data is None else str(data)

    if value_type is ValueType.NONE:
        if data is None or data == "":
            return None
        return _coerce_binary(data)

    raise InvalidDataError(f"Cannot write values of type {value_type.display_name}")
