"""Value objects produced by a maintenance run."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class OperationName(str, Enum):
    """Named unit of diagnostic or remediation work."""

    FILE_SYSTEM_SCAN = "FileSystemScan"
    SYSTEM_FILE_CHECK = "SystemFileCheck"
    COMPONENT_STORE_SCAN = "ComponentStoreScan"
    COMPONENT_STORE_REPAIR = "ComponentStoreRepair"
    COMPONENT_STORE_CLEANUP = "ComponentStoreCleanup"
    WINDOWS_UPDATE_CHECK = "WindowsUpdateCheck"
    WINDOWS_UPDATE_APPLY = "WindowsUpdateApply"


class Mode(str, Enum):
    """Whether operations only inspect the host or also remediate."""

    VERIFY_ONLY = "verify"
    APPLY = "apply"


class OutcomeKind(str, Enum):
    """Semantic classification of a finished operation."""

    HEALTHY = "Healthy"
    NEEDS_CLEANUP = "NeedsCleanup"
    CONTAINS_ERRORS = "ContainsErrors"
    HEALTH_ISSUES_DETECTED = "HealthIssuesDetected"
    UNEXPECTED_FAILURE = "UnexpectedFailure"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ToolInvocationResult(_Frozen):
    """Raw capture of one external process run."""

    command: str
    output: tuple[str, ...] = ()
    exit_status: int


class Signal(_Frozen):
    """Warning or error raised alongside a classified result."""

    level: Literal["warn", "error"]
    message: str


class Verdict(_Frozen):
    """Classifier output: the outcome plus an optional signal."""

    outcome: OutcomeKind
    signal: Signal | None = None


class UpdateInfo(_Frozen):
    """One available or applied update."""

    identifier: str
    title: str


class OperationResult(_Frozen):
    """Outcome of one operation, fixed once its tool has exited."""

    operation: OperationName
    mode: Mode
    outcome: OutcomeKind
    invocation: ToolInvocationResult | None = Field(
        default=None,
        description="Captured tool run; None if the tool never launched",
    )
    signal: Signal | None = None
    updates: tuple[UpdateInfo, ...] = ()
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def healthy(self) -> bool:
        return self.outcome is OutcomeKind.HEALTHY


# Report field for each operation, in catalog order
SLOTS: dict[OperationName, str] = {
    OperationName.FILE_SYSTEM_SCAN: "file_system_scan",
    OperationName.SYSTEM_FILE_CHECK: "system_file_check",
    OperationName.COMPONENT_STORE_SCAN: "component_store_scan",
    OperationName.COMPONENT_STORE_REPAIR: "component_store_repair",
    OperationName.WINDOWS_UPDATE_CHECK: "windows_update_check",
    OperationName.WINDOWS_UPDATE_APPLY: "windows_update_apply",
    OperationName.COMPONENT_STORE_CLEANUP: "component_store_cleanup",
}


class MaintenanceReport(_Frozen):
    """Aggregate result of one orchestrator call.

    Exactly the slots of operations that ran are set; every other slot
    stays None. Build it with from_results() once all operations have
    been attempted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_system_scan: OperationResult | None = Field(
        default=None, alias="FileSystemScan"
    )
    system_file_check: OperationResult | None = Field(
        default=None, alias="SystemFileCheck"
    )
    component_store_scan: OperationResult | None = Field(
        default=None, alias="ComponentStoreScan"
    )
    component_store_repair: OperationResult | None = Field(
        default=None, alias="ComponentStoreRepair"
    )
    windows_update_check: OperationResult | None = Field(
        default=None, alias="WindowsUpdateCheck"
    )
    windows_update_apply: OperationResult | None = Field(
        default=None, alias="WindowsUpdateApply"
    )
    component_store_cleanup: OperationResult | None = Field(
        default=None, alias="ComponentStoreCleanup"
    )

    @classmethod
    def from_results(cls, results: list[OperationResult]) -> MaintenanceReport:
        return cls(**{SLOTS[r.operation]: r for r in results})

    def get(self, name: OperationName) -> OperationResult | None:
        return getattr(self, SLOTS[name])

    def populated(self) -> list[OperationResult]:
        """Set slots, in catalog order."""
        return [r for name in SLOTS if (r := self.get(name)) is not None]

    @property
    def requested(self) -> set[OperationName]:
        return {r.operation for r in self.populated()}

    @property
    def healthy(self) -> bool:
        return all(r.healthy for r in self.populated())


__all__ = [
    "OperationName",
    "Mode",
    "OutcomeKind",
    "ToolInvocationResult",
    "Signal",
    "Verdict",
    "UpdateInfo",
    "OperationResult",
    "MaintenanceReport",
    "SLOTS",
]
