"""Shared behavior of the maintenance subcommands."""

from __future__ import annotations

import sys
from abc import abstractmethod
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from hostmend.core.errors import InvalidSelection, PermissionDenied
from hostmend.core.log import logger
from hostmend.core.result import MaintenanceReport, OperationName
from hostmend.maintenance.catalog import ALL
from hostmend.maintenance.orchestrator import MaintenanceOrchestrator

if TYPE_CHECKING:
    from hostmend.core.config import State

EXIT_HEALTHY = 0
EXIT_ISSUES = 1
EXIT_REFUSED = 2


class MaintenanceCommand(BaseModel):
    """Base for subcommands that run one orchestrator entry point."""

    operations: list[OperationName] = Field(
        default_factory=list,
        description="Operations to run; empty runs all of them",
    )

    @abstractmethod
    def run(
        self, orchestrator: MaintenanceOrchestrator
    ) -> MaintenanceReport:
        """Call the orchestrator entry point this command stands for."""

    def run_workflow(
        self,
        state: State,
        orchestrator: MaintenanceOrchestrator | None = None,
    ) -> int:
        """Run the command and print the report as JSON.

        Returns:
            Exit code: 0 all healthy, 1 issues found, 2 refused
        """
        orchestrator = orchestrator or MaintenanceOrchestrator(
            state.config.tools
        )
        try:
            report = self.run(orchestrator)
        except (PermissionDenied, InvalidSelection) as e:
            logger.error(str(e))
            return EXIT_REFUSED

        sys.stdout.write(
            report.model_dump_json(indent=2, by_alias=True, exclude_none=True)
            + "\n"
        )
        return EXIT_HEALTHY if report.healthy else EXIT_ISSUES

    @property
    def selection(self):
        return self.operations or ALL


__all__ = ["MaintenanceCommand"]
