"""Shared fixtures: an in-memory stand-in for the win32service module."""

import pytest

from winsvc_status.service.windows import WindowsServiceInspector

ERROR_ACCESS_DENIED = 5
ERROR_SERVICE_DOES_NOT_EXIST = 1060


class FakeWinError(Exception):
    """Shaped like pywintypes.error: (winerror, funcname, strerror)."""

    def __init__(self, winerror: int, funcname: str, strerror: str = "Fake failure"):
        super().__init__(winerror, funcname, strerror)
        self.winerror = winerror
        self.funcname = funcname
        self.strerror = strerror


class FakeHandle:
    def __init__(self, kind: str, target: str | None):
        self.kind = kind
        self.target = target

    def __repr__(self):
        return f"<FakeHandle {self.kind} {self.target}>"


class FakeServiceControl:
    """Fake win32service module tracking open handles and calls.

    Failures are injected per API name with fail(); they fire before the
    call has any effect, so an injected OpenService failure opens nothing.
    """

    SC_MANAGER_CONNECT = 0x0001
    SC_MANAGER_ENUMERATE_SERVICE = 0x0004
    SERVICE_QUERY_CONFIG = 0x0001
    SERVICE_QUERY_STATUS = 0x0004
    SERVICE_WIN32 = 0x0030
    SERVICE_STATE_ALL = 0x0003
    SC_ENUM_PROCESS_INFO = 0

    def __init__(self):
        self.services: dict[str, dict] = {}
        self.open_handles: list[FakeHandle] = []
        self.calls: list[str] = []
        self._failures: dict[str, list] = {}

    def add_service(self, name: str, display_name: str | None, state: int = 4, pid: int = 0):
        self.services[name.lower()] = {
            "name": name,
            "display_name": display_name,
            "state": state,
            "pid": pid,
        }

    def fail(self, funcname: str, winerror: int, times: int | None = None):
        """Make `funcname` raise `winerror`; `times=None` means always."""
        self._failures[funcname] = [winerror, times]

    def _enter(self, funcname: str):
        self.calls.append(funcname)
        failure = self._failures.get(funcname)
        if failure is None:
            return
        winerror, remaining = failure
        if remaining is not None:
            if remaining <= 0:
                return
            failure[1] = remaining - 1
        raise FakeWinError(winerror, funcname)

    def _open(self, kind: str, target: str | None) -> FakeHandle:
        handle = FakeHandle(kind, target)
        self.open_handles.append(handle)
        return handle

    def _check_open(self, handle: FakeHandle, kind: str):
        assert handle in self.open_handles, f"{handle!r} used after close"
        assert handle.kind == kind

    def OpenSCManager(self, machine_name, database_name, desired_access):
        self._enter("OpenSCManager")
        assert machine_name is None and database_name is None
        assert desired_access == self.SC_MANAGER_CONNECT | self.SC_MANAGER_ENUMERATE_SERVICE
        return self._open("manager", None)

    def OpenService(self, scm, name, desired_access):
        self._enter("OpenService")
        self._check_open(scm, "manager")
        assert desired_access == self.SERVICE_QUERY_STATUS | self.SERVICE_QUERY_CONFIG
        if name.lower() not in self.services:
            raise FakeWinError(ERROR_SERVICE_DOES_NOT_EXIST, "OpenService")
        return self._open("service", name.lower())

    def QueryServiceStatusEx(self, handle):
        self._enter("QueryServiceStatusEx")
        self._check_open(handle, "service")
        svc = self.services[handle.target]
        return {
            "ServiceType": 0x10,
            "CurrentState": svc["state"],
            "ControlsAccepted": 0,
            "Win32ExitCode": 0,
            "ServiceSpecificExitCode": 0,
            "CheckPoint": 0,
            "WaitHint": 0,
            "ProcessId": svc["pid"],
            "ServiceFlags": 0,
        }

    def QueryServiceConfig(self, handle):
        self._enter("QueryServiceConfig")
        self._check_open(handle, "service")
        svc = self.services[handle.target]
        return (0x10, 2, 1, r"C:\Windows\System32\svc.exe", "", 0, [], "LocalSystem", svc["display_name"])

    def EnumServicesStatusEx(self, scm, service_type, service_state, group_name, info_level):
        self._enter("EnumServicesStatusEx")
        self._check_open(scm, "manager")
        assert service_type == self.SERVICE_WIN32
        assert service_state == self.SERVICE_STATE_ALL
        assert info_level == self.SC_ENUM_PROCESS_INFO
        return [
            {
                "ServiceName": svc["name"],
                "DisplayName": svc["display_name"],
                "ServiceType": 0x10,
                "CurrentState": svc["state"],
                "ControlsAccepted": 0,
                "Win32ExitCode": 0,
                "ServiceSpecificExitCode": 0,
                "CheckPoint": 0,
                "WaitHint": 0,
                "ProcessId": svc["pid"],
                "ServiceFlags": 0,
            }
            for svc in self.services.values()
        ]

    def CloseServiceHandle(self, handle):
        # The SCM frees the handle even when it reports a close failure
        self.open_handles.remove(handle)
        self._enter("CloseServiceHandle")


@pytest.fixture
def scm():
    """Fake SCM seeded with a running Spooler and a stopped wuauserv."""
    fake = FakeServiceControl()
    fake.add_service("Spooler", "Print Spooler", state=4, pid=2412)
    fake.add_service("wuauserv", "Windows Update", state=1, pid=0)
    return fake


@pytest.fixture
def inspector(scm):
    """Windows inspector wired to the fake SCM."""
    return WindowsServiceInspector(api=scm, error=FakeWinError)
