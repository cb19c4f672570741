"""Service Control Manager inspection for Windows, via pywin32."""

import logging
from contextlib import contextmanager
from typing import Iterator

from ..errors import PermissionDenied, PlatformError, Resource
from .base import ServiceInspector, ServiceState, ServiceStatusRecord

logger = logging.getLogger(__name__)

ERROR_ACCESS_DENIED = 5
ERROR_INSUFFICIENT_BUFFER = 122
ERROR_MORE_DATA = 234
ERROR_SERVICE_DOES_NOT_EXIST = 1060

# The service table can grow between pywin32's sizing call and its fetch.
ENUM_MAX_ATTEMPTS = 3

# QueryServiceConfig returns a tuple; the display name is the last field.
_CONFIG_DISPLAY_NAME = 8


class WindowsServiceInspector(ServiceInspector):
    """SCM-backed inspector for Windows.

    Args:
        api: Module providing the win32service functions and constants.
            Defaults to win32service.
        error: Exception type raised by api calls. Defaults to
            pywintypes.error.
    """

    def __init__(self, api=None, error: type[BaseException] | None = None):
        if api is None:
            import win32service

            api = win32service
        if error is None:
            import pywintypes

            error = pywintypes.error
        self._api = api
        self._error = error

    @property
    def platform_name(self) -> str:
        return "windows"

    @contextmanager
    def _manager_session(self) -> Iterator[object]:
        """Open the SCM with connect and enumerate rights, closing it on exit."""
        api = self._api
        try:
            handle = api.OpenSCManager(
                None, None, api.SC_MANAGER_CONNECT | api.SC_MANAGER_ENUMERATE_SERVICE
            )
        except self._error as e:
            if getattr(e, "winerror", None) == ERROR_ACCESS_DENIED:
                raise PermissionDenied(Resource.MANAGER, winerror=ERROR_ACCESS_DENIED) from e
            raise PlatformError.from_native(e, "OpenSCManager") from e
        logger.debug("Opened service control manager")
        try:
            yield handle
        finally:
            self._close(handle)
            logger.debug("Closed service control manager")

    @contextmanager
    def _service_handle(self, scm: object, name: str) -> Iterator[object | None]:
        """Open a named service for querying.

        Yields None when the service is not registered.
        """
        api = self._api
        try:
            handle = api.OpenService(
                scm, name, api.SERVICE_QUERY_STATUS | api.SERVICE_QUERY_CONFIG
            )
        except self._error as e:
            code = getattr(e, "winerror", None)
            if code == ERROR_ACCESS_DENIED:
                raise PermissionDenied(Resource.SERVICE, name, ERROR_ACCESS_DENIED) from e
            if code != ERROR_SERVICE_DOES_NOT_EXIST:
                raise PlatformError.from_native(e, "OpenService") from e
            logger.debug("Service %r does not exist", name)
            handle = None

        if handle is None:
            yield None
            return
        try:
            yield handle
        finally:
            self._close(handle)

    def _close(self, handle: object) -> None:
        # A failed close must not mask the result or the error in flight.
        try:
            self._api.CloseServiceHandle(handle)
        except self._error as e:
            logger.debug("CloseServiceHandle failed: %s", e)

    def _service_exists(self, name: str) -> bool:
        with self._manager_session() as scm:
            with self._service_handle(scm, name) as handle:
                return handle is not None

    def _get_service_status(self, name: str) -> ServiceStatusRecord:
        with self._manager_session() as scm:
            with self._service_handle(scm, name) as handle:
                if handle is None:
                    return ServiceStatusRecord.not_found(name)

                try:
                    status = self._api.QueryServiceStatusEx(handle)
                except self._error as e:
                    raise PlatformError.from_native(e, "QueryServiceStatusEx") from e

                return ServiceStatusRecord(
                    name=name,
                    exists=True,
                    state=ServiceState.from_code(status["CurrentState"]),
                    pid=int(status.get("ProcessId") or 0),
                    display_name=self._query_display_name(handle, name),
                    raw_code=status["CurrentState"],
                )

    def _query_display_name(self, handle: object, name: str) -> str:
        # Best-effort: status is already known, so a config failure only
        # costs us the label.
        try:
            config = self._api.QueryServiceConfig(handle)
        except self._error as e:
            logger.debug("Could not read display name of %r: %s", name, e)
            return ""
        return config[_CONFIG_DISPLAY_NAME] or ""

    def _list_services(self) -> list[ServiceStatusRecord]:
        with self._manager_session() as scm:
            entries = self._enumerate(scm)

        return [
            ServiceStatusRecord(
                name=entry["ServiceName"],
                exists=True,
                state=ServiceState.from_code(entry["CurrentState"]),
                pid=int(entry.get("ProcessId") or 0),
                display_name=entry.get("DisplayName") or "",
                raw_code=entry["CurrentState"],
            )
            for entry in entries
        ]

    def _enumerate(self, scm: object) -> list[dict]:
        """Fetch process status for every Win32 service in one pass."""
        api = self._api
        attempt = 1
        while True:
            try:
                return list(
                    api.EnumServicesStatusEx(
                        scm,
                        api.SERVICE_WIN32,
                        api.SERVICE_STATE_ALL,
                        None,
                        api.SC_ENUM_PROCESS_INFO,
                    )
                )
            except self._error as e:
                code = getattr(e, "winerror", None)
                if code in (ERROR_MORE_DATA, ERROR_INSUFFICIENT_BUFFER) and attempt < ENUM_MAX_ATTEMPTS:
                    logger.warning(
                        "Service table changed size during enumeration, retrying (%d/%d)",
                        attempt,
                        ENUM_MAX_ATTEMPTS,
                    )
                    attempt += 1
                    continue
                raise PlatformError.from_native(e, "EnumServicesStatusEx") from e
