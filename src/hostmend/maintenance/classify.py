"""Exit-status tables for each maintenance tool family.

Each tool speaks its own exit-status vocabulary. The tables here turn
a raw status into an OutcomeKind so the orchestrator never needs to
know which tool it just ran. Adding a tool means adding a family, a
table and a fallback.
"""

from __future__ import annotations

from enum import Enum

from hostmend.core.errors import ToolLaunchFailure
from hostmend.core.result import OutcomeKind, Signal, Verdict


class ToolFamily(str, Enum):
    """Tools sharing one exit-status vocabulary."""

    FILESYSTEM_CHECK = "filesystem-check"
    SYSTEM_FILE_CHECK = "system-file-check"
    COMPONENT_STORE_SCAN = "component-store-scan"
    COMPONENT_STORE_SERVICING = "component-store-servicing"
    WINDOWS_UPDATE = "windows-update"


_HEALTHY = Verdict(outcome=OutcomeKind.HEALTHY)

# Win32 error DISM /ScanHealth exits with on a corrupt component store
ERROR_SXS_COMPONENT_STORE_CORRUPT = 14098

# Documented statuses per family; 0 is healthy everywhere
EXIT_STATUS_TABLE: dict[ToolFamily, dict[int, Verdict]] = {
    ToolFamily.FILESYSTEM_CHECK: {
        0: _HEALTHY,
        2: Verdict(
            outcome=OutcomeKind.NEEDS_CLEANUP,
            signal=Signal(
                level="warn", message="Volume needs cleanup"
            ),
        ),
        3: Verdict(
            outcome=OutcomeKind.CONTAINS_ERRORS,
            signal=Signal(
                level="warn",
                message="Volume contains errors that were not fixed",
            ),
        ),
    },
    ToolFamily.SYSTEM_FILE_CHECK: {0: _HEALTHY},
    ToolFamily.COMPONENT_STORE_SCAN: {
        0: _HEALTHY,
        ERROR_SXS_COMPONENT_STORE_CORRUPT: Verdict(
            outcome=OutcomeKind.HEALTH_ISSUES_DETECTED,
            signal=Signal(
                level="warn",
                message="Component store is corrupt and needs repair",
            ),
        ),
    },
    ToolFamily.COMPONENT_STORE_SERVICING: {0: _HEALTHY},
    ToolFamily.WINDOWS_UPDATE: {0: _HEALTHY},
}

# Outcome and signal level for statuses missing from the table
FALLBACK: dict[ToolFamily, tuple[OutcomeKind, str]] = {
    ToolFamily.FILESYSTEM_CHECK: (OutcomeKind.UNEXPECTED_FAILURE, "error"),
    ToolFamily.SYSTEM_FILE_CHECK: (OutcomeKind.UNEXPECTED_FAILURE, "error"),
    ToolFamily.COMPONENT_STORE_SCAN: (
        OutcomeKind.UNEXPECTED_FAILURE, "error"
    ),
    ToolFamily.COMPONENT_STORE_SERVICING: (
        OutcomeKind.UNEXPECTED_FAILURE, "error"
    ),
    ToolFamily.WINDOWS_UPDATE: (OutcomeKind.UNEXPECTED_FAILURE, "error"),
}


def classify(family: ToolFamily, exit_status: int) -> Verdict:
    """Classify a tool's exit status. Never raises."""
    known = EXIT_STATUS_TABLE[family].get(exit_status)
    if known is not None:
        return known

    outcome, level = FALLBACK[family]
    return Verdict(
        outcome=outcome,
        signal=Signal(
            level=level,
            message=f"{family.value} exited with status {exit_status}",
        ),
    )


def launch_failure(error: ToolLaunchFailure) -> Verdict:
    """Verdict for a tool that never started."""
    return Verdict(
        outcome=OutcomeKind.UNEXPECTED_FAILURE,
        signal=Signal(level="error", message=str(error)),
    )
