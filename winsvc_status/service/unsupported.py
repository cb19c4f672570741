"""Inspector for hosts without a Service Control Manager."""

from ..errors import UnsupportedPlatform
from .base import ServiceInspector, ServiceStatusRecord


class UnsupportedServiceInspector(ServiceInspector):
    """Every operation raises UnsupportedPlatform (after argument checks)."""

    def __init__(self, system: str):
        self.system = system

    @property
    def platform_name(self) -> str:
        return "unsupported"

    @property
    def supported(self) -> bool:
        return False

    def _service_exists(self, name: str) -> bool:
        raise UnsupportedPlatform(self.system)

    def _get_service_status(self, name: str) -> ServiceStatusRecord:
        raise UnsupportedPlatform(self.system)

    def _list_services(self) -> list[ServiceStatusRecord]:
        raise UnsupportedPlatform(self.system)
