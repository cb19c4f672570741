"""Error types raised by service inspectors."""

from enum import Enum


class Resource(Enum):
    """Which SCM object an access check failed on."""

    MANAGER = "manager"
    SERVICE = "service"


class ServiceInspectionError(Exception):
    """Base class for all service inspection failures."""


class InvalidArgument(ServiceInspectionError, ValueError):
    """The service name was missing, empty, or not a string."""


class PermissionDenied(ServiceInspectionError, PermissionError):
    """The caller lacks rights to open the service manager or a service.

    Attributes:
        resource: Resource.MANAGER when the SCM itself refused the caller
            (usually fixed by running elevated), Resource.SERVICE when a
            specific service is protected.
        service_name: Name of the denied service, None for the manager.
        winerror: Native error code reported by the platform.
    """

    def __init__(
        self,
        resource: Resource,
        service_name: str | None = None,
        winerror: int | None = None,
    ):
        self.resource = resource
        self.service_name = service_name
        self.winerror = winerror
        if resource is Resource.MANAGER:
            message = "Access denied opening Service Control Manager"
        else:
            message = f"Access denied opening service '{service_name}'"
        super().__init__(message)


class PlatformError(ServiceInspectionError):
    """Any other failure reported by the service control subsystem.

    Attributes:
        winerror: Native error code, kept for diagnostics.
        operation: Name of the failing API call, when known.
        strerror: Native error message, when known.
    """

    def __init__(
        self,
        winerror: int | None,
        operation: str | None = None,
        strerror: str | None = None,
    ):
        self.winerror = winerror
        self.operation = operation
        self.strerror = strerror
        message = f"{operation or 'Service control call'} failed (error {winerror})"
        if strerror:
            message += f": {strerror}"
        super().__init__(message)

    @classmethod
    def from_native(cls, exc: BaseException, operation: str | None = None) -> "PlatformError":
        """Build from a pywintypes.error (or anything shaped like one)."""
        return cls(
            winerror=getattr(exc, "winerror", None),
            operation=getattr(exc, "funcname", None) or operation,
            strerror=getattr(exc, "strerror", None),
        )


class UnsupportedPlatform(ServiceInspectionError, NotImplementedError):
    """Service inspection is not available on this host."""

    def __init__(self, system: str):
        self.system = system
        super().__init__(
            f"Service inspection is not supported on {system}. "
            "Supported platforms: Windows (Service Control Manager)"
        )
