class RegistryError(Exception):
    """Base class for every host-scoped registry failure."""

    kind = "error"


class UnreachableError(RegistryError):
    kind = "unreachable"


class ConnectError(RegistryError):
    """Opening the hive on a host failed (permission, protocol, unsupported hive)."""

    kind = "connect"


class NotFoundError(RegistryError):
    kind = "not_found"


class AccessError(RegistryError):
    """Permission or protocol failure while navigating or executing."""

    kind = "access"


class NotEmptyError(AccessError):
    kind = "not_empty"


class InvalidDataError(RegistryError):
    """Raised when data cannot be coerced to the requested value type."""

    kind = "invalid_data"
