"""Read-only status of Windows services.

Usage:
    from winsvc_status import get_service_status, is_supported

    if is_supported():
        record = get_service_status("Spooler")
        print(record.state, record.pid, record.display_name)

On hosts without a Service Control Manager every operation raises
UnsupportedPlatform; call is_supported() first.
"""

from .errors import (
    InvalidArgument,
    PermissionDenied,
    PlatformError,
    Resource,
    ServiceInspectionError,
    UnsupportedPlatform,
)
from .service import (
    ServiceInspector,
    ServiceState,
    ServiceStatusRecord,
    get_service_inspector,
)

__version__ = "0.1.0"

# Chosen once per process; call sites never branch on the platform.
_inspector: ServiceInspector | None = None


def _default_inspector() -> ServiceInspector:
    global _inspector
    if _inspector is None:
        _inspector = get_service_inspector()
    return _inspector


def is_supported() -> bool:
    """Return True if this host can inspect services."""
    return _default_inspector().supported


def service_exists(name: str) -> bool:
    """Check whether a service named `name` is registered."""
    return _default_inspector().service_exists(name)


def get_service_status(name: str) -> ServiceStatusRecord:
    """Get the status of the service named `name`."""
    return _default_inspector().get_service_status(name)


def list_services() -> list[ServiceStatusRecord]:
    """List every registered service."""
    return _default_inspector().list_services()


__all__ = [
    "InvalidArgument",
    "PermissionDenied",
    "PlatformError",
    "Resource",
    "ServiceInspectionError",
    "ServiceInspector",
    "ServiceState",
    "ServiceStatusRecord",
    "UnsupportedPlatform",
    "get_service_inspector",
    "get_service_status",
    "is_supported",
    "list_services",
    "service_exists",
]
