"""Exceptions raised by hostmend.

Only PermissionDenied and InvalidSelection ever reach the caller of a
maintenance run. ToolLaunchFailure is caught per operation and turned
into an UnexpectedFailure slot in the report.
"""

from __future__ import annotations

from collections.abc import Iterable


class HostmendError(Exception):
    """Base class for hostmend errors."""


class PermissionDenied(HostmendError):
    """Privileged operations were requested without elevation."""

    def __init__(self, operations: Iterable[str]):
        self.operations = tuple(operations)
        super().__init__(
            "Administrator rights are required for: "
            + ", ".join(self.operations)
        )


class ToolLaunchFailure(HostmendError):
    """An external tool could not be started at all."""

    def __init__(self, executable: str, reason: str):
        self.executable = executable
        self.reason = reason
        super().__init__(f"Cannot launch {executable}: {reason}")


class InvalidSelection(HostmendError, ValueError):
    """The requested operations do not fit the entry point or mode."""
