import logging
import os
import socket
import subprocess
import sys
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

LOCAL_ALIASES = {"", ".", "localhost", "127.0.0.1", "::1"}
REMOTE_REGISTRY_SERVICE = "RemoteRegistry"
PING_TIMEOUT_ENV = "REMOTEREG_PING_TIMEOUT"
FALLBACK_PING_TIMEOUT = 2.0


def ping_timeout_from_env() -> float:
    """Ping timeout in seconds from the environment; malformed values fall back."""
    raw = os.environ.get(PING_TIMEOUT_ENV)
    if not raw:
        return FALLBACK_PING_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning("ignoring %s=%r: not a number", PING_TIMEOUT_ENV, raw)
        return FALLBACK_PING_TIMEOUT
    if timeout <= 0:
        logger.warning("ignoring %s=%r: must be positive", PING_TIMEOUT_ENV, raw)
        return FALLBACK_PING_TIMEOUT
    return timeout


DEFAULT_PING_TIMEOUT = ping_timeout_from_env()

_local_name: Optional[str] = None


def local_host_name() -> str:
    """Machine name of this host, resolved once per process."""
    global _local_name
    if _local_name is None:
        _local_name = (os.environ.get("COMPUTERNAME") or socket.gethostname()).upper()
    return _local_name


class HostIdentity:

    def __init__(self, name: str, is_local: bool = False) -> None:
        self.name = name
        self.is_local = is_local

    @property
    def transport_name(self) -> Optional[str]:
        """Host argument for the transport; None binds the local registry."""
        return None if self.is_local else self.name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"HostIdentity('{self.name}', is_local={self.is_local})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, HostIdentity):
            return False
        return self.name.lower() == other.name.lower()

    def __hash__(self) -> int:
        return hash(self.name.lower())


class HostResolver:

    def __init__(
        self,
        ping_timeout: float = DEFAULT_PING_TIMEOUT,
        check_service: bool = False,
    ) -> None:
        self.ping_timeout = ping_timeout
        self.check_service = check_service

    def resolve(self, raw: Optional[str]) -> HostIdentity:
        name = (raw or "").strip()
        if name.startswith("\\\\"):
            name = name[2:]

        local = local_host_name()
        if name.lower() in LOCAL_ALIASES or name.upper() == local:
            return HostIdentity(local, is_local=True)
        return HostIdentity(name)

    def probe(self, host: HostIdentity) -> Tuple[bool, str]:
        """
        Check that ``host`` answers before any connection attempt.

        Returns:
            Tuple of (reachable, reason). ``reason`` is empty when reachable.
        """
        if host.is_local:
            return True, ""

        if not self._ping(host.name):
            return False, f"{host.name} is not responding"

        if self.check_service and not self._service_running(host.name):
            return False, f"{REMOTE_REGISTRY_SERVICE} service is not running on {host.name}"

        return True, ""

    def _ping(self, name: str) -> bool:
        if sys.platform == "win32":
            cmd = ["ping", "-n", "1", "-w", str(int(self.ping_timeout * 1000)), name]
        else:
            cmd = ["ping", "-c", "1", "-W", str(max(1, int(self.ping_timeout))), name]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.ping_timeout + 5,
            )
        except subprocess.TimeoutExpired:
            logger.debug("ping %s timed out", name)
            return False

        logger.debug("ping %s -> %s", name, result.returncode)
        return result.returncode == 0

    def _service_running(self, name: str) -> bool:
        import win32service
        import win32serviceutil

        status = win32serviceutil.QueryServiceStatus(REMOTE_REGISTRY_SERVICE, name)[1]
        return status == win32service.SERVICE_RUNNING
