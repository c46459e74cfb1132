"""Updates command - routine maintenance actions."""

from pydantic import Field

from hostmend.command.base import MaintenanceCommand
from hostmend.core.result import MaintenanceReport, Mode
from hostmend.maintenance.orchestrator import MaintenanceOrchestrator


class UpdatesCommand(MaintenanceCommand):
    """Run routine maintenance such as component store cleanup.

    Verify mode only analyzes the component store; apply mode starts
    the cleanup.
    """

    mode: Mode = Field(
        default=Mode.APPLY,
        description="'verify' only analyzes; 'apply' cleans up",
    )

    def run(
        self, orchestrator: MaintenanceOrchestrator
    ) -> MaintenanceReport:
        return orchestrator.run_updates(self.selection, self.mode)
