"""Base service inspector interface."""

import platform
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from ..errors import InvalidArgument


class ServiceState(Enum):
    """Service state enumeration."""

    STOPPED = "stopped"
    START_PENDING = "start_pending"
    STOP_PENDING = "stop_pending"
    RUNNING = "running"
    CONTINUE_PENDING = "continue_pending"
    PAUSE_PENDING = "pause_pending"
    PAUSED = "paused"
    UNKNOWN = "unknown"
    NOT_FOUND = "not_found"

    @classmethod
    def from_code(cls, code: int) -> "ServiceState":
        """Map a native dwCurrentState value, falling back to UNKNOWN."""
        return _STATE_CODES.get(code, cls.UNKNOWN)


# winsvc.h SERVICE_STOPPED .. SERVICE_PAUSED
_STATE_CODES = {
    1: ServiceState.STOPPED,
    2: ServiceState.START_PENDING,
    3: ServiceState.STOP_PENDING,
    4: ServiceState.RUNNING,
    5: ServiceState.CONTINUE_PENDING,
    6: ServiceState.PAUSE_PENDING,
    7: ServiceState.PAUSED,
}


@dataclass(frozen=True)
class ServiceStatusRecord:
    """Status of a single service.

    Records are plain values: the handles used to build them are already
    closed by the time a record reaches the caller.
    """

    name: str
    exists: bool
    state: ServiceState
    pid: int = 0
    display_name: str | None = None
    raw_code: int | None = None

    def __post_init__(self):
        if not self.exists and (
            self.state is not ServiceState.NOT_FOUND
            or self.pid != 0
            or self.display_name is not None
            or self.raw_code is not None
        ):
            raise ValueError(
                "A missing service must have state not_found, pid 0, no display name and no raw code"
            )
        if self.exists and self.state is ServiceState.NOT_FOUND:
            raise ValueError("An existing service cannot have state not_found")

    @classmethod
    def not_found(cls, name: str) -> "ServiceStatusRecord":
        """Record for a name with no registered service."""
        return cls(name=name, exists=False, state=ServiceState.NOT_FOUND)

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "exists": self.exists,
            "state": self.state.value,
            "pid": self.pid,
            "raw_code": self.raw_code,
        }
        if self.exists:
            data["display_name"] = self.display_name or ""
        return data


def validate_service_name(name: object) -> str:
    """Reject anything but a non-empty string before touching the platform."""
    if not isinstance(name, str) or not name:
        raise InvalidArgument("Service name must be a non-empty string")
    return name


class ServiceInspector(ABC):
    """Abstract base class for read-only service inspection.

    Public methods validate their arguments and then delegate to the
    platform hooks, so every variant rejects bad names the same way.
    """

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Return the platform name (e.g., 'windows', 'unsupported')."""
        ...

    @property
    def supported(self) -> bool:
        return True

    def service_exists(self, name: str) -> bool:
        """Check whether a service is registered.

        Args:
            name: Short service name (e.g. "Spooler")

        Returns:
            True if the service exists, False otherwise

        Raises:
            InvalidArgument: If name is not a non-empty string
            PermissionDenied: If the manager or the service refused access
            PlatformError: On any other platform failure
        """
        return self._service_exists(validate_service_name(name))

    def get_service_status(self, name: str) -> ServiceStatusRecord:
        """Get the current status of a service.

        A missing service is reported as a record with exists=False
        rather than as an error.

        Args:
            name: Short service name (e.g. "Spooler")

        Returns:
            ServiceStatusRecord for the service
        """
        return self._get_service_status(validate_service_name(name))

    def list_services(self) -> list[ServiceStatusRecord]:
        """List all registered services in platform enumeration order."""
        return self._list_services()

    @abstractmethod
    def _service_exists(self, name: str) -> bool:
        ...

    @abstractmethod
    def _get_service_status(self, name: str) -> ServiceStatusRecord:
        ...

    @abstractmethod
    def _list_services(self) -> list[ServiceStatusRecord]:
        ...


def get_service_inspector() -> ServiceInspector:
    """Get the appropriate service inspector for the current platform.

    Returns:
        WindowsServiceInspector on Windows, otherwise an inspector whose
        operations all raise UnsupportedPlatform
    """
    system = platform.system()

    if system == "Windows":
        from .windows import WindowsServiceInspector

        return WindowsServiceInspector()
    else:
        from .unsupported import UnsupportedServiceInspector

        return UnsupportedServiceInspector(system)
