"""hostmend - host health checks and routine Windows maintenance."""

from hostmend.core.errors import (
    HostmendError,
    InvalidSelection,
    PermissionDenied,
    ToolLaunchFailure,
)
from hostmend.core.privilege import is_elevated
from hostmend.core.result import (
    MaintenanceReport,
    Mode,
    OperationName,
    OperationResult,
    OutcomeKind,
    ToolInvocationResult,
    UpdateInfo,
)
from hostmend.maintenance.catalog import ALL
from hostmend.maintenance.orchestrator import (
    MaintenanceOrchestrator,
    run_checks,
    run_updates,
)

__all__ = [
    "ALL",
    "HostmendError",
    "InvalidSelection",
    "MaintenanceOrchestrator",
    "MaintenanceReport",
    "Mode",
    "OperationName",
    "OperationResult",
    "OutcomeKind",
    "PermissionDenied",
    "ToolInvocationResult",
    "ToolLaunchFailure",
    "UpdateInfo",
    "is_elevated",
    "run_checks",
    "run_updates",
]
