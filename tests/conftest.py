"""Pytest configuration and fixtures for hostmend tests."""

import tempfile
from pathlib import Path

import pytest

from hostmend.core.config import ToolsConfig
from hostmend.core.errors import ToolLaunchFailure
from hostmend.core.log import ConsoleSink, FileSink, setup_logger
from hostmend.core.result import ToolInvocationResult, UpdateInfo
from hostmend.maintenance.updates import UpdateQuery


def console_logging():
    """Install console-only debug logging."""
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "hostmend-tests",
        run_name="test",
        console=ConsoleSink(level="debug"),
        file=FileSink(enabled=False),
    )


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    console_logging()


@pytest.fixture
def restore_logging():
    """Put console logging back after a test installs its own logger."""
    yield
    console_logging()


class FakeInvoker:
    """Stands in for ToolInvoker and records every call.

    statuses maps a tool file name (chkdsk.exe, sfc.exe, Dism.exe) to
    the exit status it reports; unknown tools exit 0. Tools listed in
    missing raise ToolLaunchFailure.
    """

    def __init__(self, statuses=None, missing=()):
        self.statuses = dict(statuses or {})
        self.missing = set(missing)
        self.calls = []

    def run(self, executable, arguments=""):
        name = Path(executable).name
        self.calls.append((name, arguments))
        if name in self.missing:
            raise ToolLaunchFailure(str(executable), "executable not found")
        return ToolInvocationResult(
            command=f"{executable} {arguments}",
            output=(f"{name} output",),
            exit_status=self.statuses.get(name, 0),
        )

    @property
    def tools_run(self):
        return [name for name, _ in self.calls]


class FakeUpdateSource:
    """Stands in for WindowsUpdateSource."""

    def __init__(self, updates=(), exit_status=0, launchable=True):
        self.updates = tuple(updates)
        self.exit_status = exit_status
        self.launchable = launchable
        self.calls = []

    def list_available(self):
        return self._query("list")

    def apply_all(self):
        return self._query("apply")

    def _query(self, action):
        self.calls.append(action)
        if not self.launchable:
            raise ToolLaunchFailure("powershell.exe", "executable not found")
        return UpdateQuery(
            invocation=ToolInvocationResult(
                command=f"powershell.exe {action}",
                exit_status=self.exit_status,
            ),
            updates=self.updates if self.exit_status == 0 else (),
        )


class Elevation:
    """Privilege query stub counting how often it is asked."""

    def __init__(self, elevated=True):
        self.elevated = elevated
        self.asked = 0

    def __call__(self):
        self.asked += 1
        return self.elevated


@pytest.fixture
def tools(tmp_path):
    """Tool configuration rooted in a temporary directory."""
    return ToolsConfig(system_root=tmp_path, volume="C:")


@pytest.fixture
def invoker():
    return FakeInvoker()


@pytest.fixture
def update_source():
    return FakeUpdateSource(
        updates=[UpdateInfo(identifier="KB5034441", title="Security Update")]
    )


@pytest.fixture
def make_invoker():
    """Factory for FakeInvoker with custom statuses."""
    return FakeInvoker


@pytest.fixture
def make_update_source():
    """Factory for FakeUpdateSource."""
    return FakeUpdateSource


@pytest.fixture
def make_elevation():
    """Factory for privilege query stubs."""
    return Elevation
