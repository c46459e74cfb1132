"""Checks command - diagnose and optionally repair the host."""

from pydantic import Field

from hostmend.command.base import MaintenanceCommand
from hostmend.core.result import MaintenanceReport, Mode
from hostmend.maintenance.orchestrator import MaintenanceOrchestrator


class ChecksCommand(MaintenanceCommand):
    """Run filesystem, system file, component store and Windows
    Update checks.

    In verify mode nothing on the host is changed. In apply mode the
    repairing variants run instead: chkdsk queues offline fixes, sfc
    repairs system files, DISM restores the component store and
    pending updates are installed.
    """

    mode: Mode = Field(
        default=Mode.VERIFY_ONLY,
        description="'verify' only inspects; 'apply' repairs",
    )

    def run(
        self, orchestrator: MaintenanceOrchestrator
    ) -> MaintenanceReport:
        return orchestrator.run_checks(self.selection, self.mode)
