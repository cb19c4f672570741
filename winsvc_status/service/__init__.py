"""Service inspection for winsvc-status."""

from .base import (
    ServiceInspector,
    ServiceState,
    ServiceStatusRecord,
    get_service_inspector,
)

__all__ = [
    "ServiceInspector",
    "ServiceState",
    "ServiceStatusRecord",
    "get_service_inspector",
]
