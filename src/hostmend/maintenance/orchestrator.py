"""Run selected maintenance operations and collect one report."""

from __future__ import annotations

from collections.abc import Callable

from hostmend.core.config import ToolsConfig
from hostmend.core.errors import PermissionDenied, ToolLaunchFailure
from hostmend.core.log import logger
from hostmend.core.privilege import is_elevated
from hostmend.core.result import (
    MaintenanceReport,
    Mode,
    OperationName,
    OperationResult,
    Verdict,
)
from hostmend.core.runner import ToolInvoker
from hostmend.maintenance import catalog
from hostmend.maintenance.catalog import (
    ALL,
    CatalogEntry,
    EntryPoint,
    Selection,
)
from hostmend.maintenance.classify import ToolFamily, classify, launch_failure
from hostmend.maintenance.updates import UpdateSource, WindowsUpdateSource


class MaintenanceOrchestrator:
    """Runs catalog operations one after another.

    The orchestrator keeps only its collaborators between calls. Every
    call resolves its own selection, builds its own results and returns
    a fresh report, so concurrent calls do not interfere.
    """

    def __init__(
        self,
        tools: ToolsConfig | None = None,
        invoker: ToolInvoker | None = None,
        updates: UpdateSource | None = None,
        elevation: Callable[[], bool] = is_elevated,
    ):
        """Initialize MaintenanceOrchestrator.

        Args:
            tools: Tool locations and timeout; defaults to ToolsConfig()
            invoker: External tool invoker
            updates: Update source for the Windows Update operations
            elevation: Privilege query, asked once per call
        """
        self.tools = tools or ToolsConfig()
        self.invoker = invoker or ToolInvoker(timeout=self.tools.timeout)
        self.updates = updates or WindowsUpdateSource(
            str(self.tools.powershell_path), self.invoker
        )
        self.elevation = elevation

    def run_checks(
        self, selection: Selection = ALL, mode: Mode = Mode.VERIFY_ONLY
    ) -> MaintenanceReport:
        """Run diagnostic and repair operations.

        Raises:
            InvalidSelection: If a selected operation is not a check
            PermissionDenied: If a privileged operation was selected and
                the process is not elevated
        """
        return self._run("checks", selection, mode)

    def run_updates(
        self, selection: Selection = ALL, mode: Mode = Mode.APPLY
    ) -> MaintenanceReport:
        """Run routine maintenance actions.

        Raises:
            InvalidSelection: If a selected operation is not a
                maintenance action
            PermissionDenied: If the process is not elevated
        """
        return self._run("updates", selection, mode)

    def _run(
        self, entry_point: EntryPoint, selection: Selection, mode: Mode
    ) -> MaintenanceReport:
        mode = Mode(mode)
        planned = catalog.resolve(entry_point, selection, mode)

        with logger.span(
            f"Maintenance {entry_point}",
            mode=mode.value,
            operations=[slot.value for slot, _ in planned],
        ):
            privileged = [
                slot.value for slot, e in planned if e.requires_elevation
            ]
            if privileged and not self.elevation():
                logger.error(
                    "Elevation required", operations=privileged
                )
                raise PermissionDenied(privileged)
            logger.debug("Privilege checked", phase="privilege-checked")

            results = []
            done: dict[OperationName, OperationResult] = {}
            for slot, entry in planned:
                if entry.name not in done:
                    logger.debug(
                        f"Running {entry.name.value}", phase="running"
                    )
                    done[entry.name] = self._attempt(entry, mode)
                result = done[entry.name]
                if result.operation is not slot:
                    result = result.model_copy(update={"operation": slot})
                results.append(result)

            report = MaintenanceReport.from_results(results)
            logger.info(
                f"Maintenance {entry_point} completed",
                phase="completed",
                healthy=report.healthy,
            )
            return report

    def _attempt(self, entry: CatalogEntry, mode: Mode) -> OperationResult:
        """Run one operation; a tool that fails to launch is recorded."""
        updates = ()
        try:
            if entry.family is ToolFamily.WINDOWS_UPDATE:
                query = (
                    self.updates.apply_all()
                    if mode is Mode.APPLY
                    else self.updates.list_available()
                )
                invocation, updates = query.invocation, query.updates
            else:
                invocation = self.invoker.run(
                    self.tools.tool_path(entry.executable),
                    entry.argument_string(mode, self.tools.volume),
                )
        except ToolLaunchFailure as e:
            result = OperationResult(
                operation=entry.name,
                mode=mode,
                **self._verdict_fields(launch_failure(e)),
            )
        else:
            result = OperationResult(
                operation=entry.name,
                mode=mode,
                invocation=invocation,
                updates=updates,
                **self._verdict_fields(
                    classify(entry.family, invocation.exit_status)
                ),
            )

        self._report_signal(result)
        return result

    @staticmethod
    def _verdict_fields(verdict: Verdict) -> dict:
        return {"outcome": verdict.outcome, "signal": verdict.signal}

    @staticmethod
    def _report_signal(result: OperationResult) -> None:
        attrs = {
            "operation": result.operation.value,
            "outcome": result.outcome.value,
        }
        if result.invocation is not None:
            attrs["exit_status"] = result.invocation.exit_status
        if result.signal is None:
            logger.info(
                f"{result.operation.value}: {result.outcome.value}", **attrs
            )
        elif result.signal.level == "warn":
            logger.warn(result.signal.message, **attrs)
        else:
            logger.error(result.signal.message, **attrs)


def run_checks(
    selection: Selection = ALL,
    mode: Mode = Mode.VERIFY_ONLY,
    tools: ToolsConfig | None = None,
) -> MaintenanceReport:
    """Run diagnostic operations with the default collaborators."""
    return MaintenanceOrchestrator(tools).run_checks(selection, mode)


def run_updates(
    selection: Selection = ALL,
    mode: Mode = Mode.APPLY,
    tools: ToolsConfig | None = None,
) -> MaintenanceReport:
    """Run maintenance actions with the default collaborators."""
    return MaintenanceOrchestrator(tools).run_updates(selection, mode)
