"""Tests for the checks and updates subcommands."""

import json

import pytest

from hostmend.command import ChecksCommand, UpdatesCommand
from hostmend.command.base import EXIT_HEALTHY, EXIT_ISSUES, EXIT_REFUSED
from hostmend.core.result import Mode, OperationName
from hostmend.maintenance.orchestrator import MaintenanceOrchestrator


@pytest.fixture
def make_orchestrator(tools, update_source, make_elevation):
    def build(invoker, elevated=True):
        return MaintenanceOrchestrator(
            tools,
            invoker=invoker,
            updates=update_source,
            elevation=make_elevation(elevated),
        )
    return build


def test_healthy_checks_exit_zero(make_orchestrator, invoker, capsys):
    command = ChecksCommand()

    code = command.run_workflow(None, make_orchestrator(invoker))

    assert code == EXIT_HEALTHY
    report = json.loads(capsys.readouterr().out)
    assert list(report) == [
        "FileSystemScan",
        "SystemFileCheck",
        "ComponentStoreScan",
        "WindowsUpdateCheck",
    ]
    assert report["WindowsUpdateCheck"]["updates"] == [
        {"identifier": "KB5034441", "title": "Security Update"}
    ]


def test_issues_exit_one(make_orchestrator, make_invoker, capsys):
    invoker = make_invoker({"chkdsk.exe": 3})
    command = ChecksCommand(operations=[OperationName.FILE_SYSTEM_SCAN])

    code = command.run_workflow(None, make_orchestrator(invoker))

    assert code == EXIT_ISSUES
    report = json.loads(capsys.readouterr().out)
    assert report["FileSystemScan"]["outcome"] == "ContainsErrors"
    assert report["FileSystemScan"]["signal"]["level"] == "warn"


def test_permission_denied_exits_two(make_orchestrator, invoker, capsys):
    command = ChecksCommand()

    code = command.run_workflow(
        None, make_orchestrator(invoker, elevated=False)
    )

    assert code == EXIT_REFUSED
    assert invoker.calls == []
    assert capsys.readouterr().out == ""


def test_invalid_selection_exits_two(make_orchestrator, invoker):
    command = ChecksCommand(
        operations=[OperationName.COMPONENT_STORE_CLEANUP]
    )

    assert command.run_workflow(
        None, make_orchestrator(invoker)
    ) == EXIT_REFUSED
    assert invoker.calls == []


def test_checks_apply_mode_runs_repairs(make_orchestrator, invoker):
    command = ChecksCommand(
        operations=[OperationName.COMPONENT_STORE_REPAIR], mode="apply"
    )

    assert command.run_workflow(
        None, make_orchestrator(invoker)
    ) == EXIT_HEALTHY
    assert invoker.calls == [
        ("Dism.exe", "/Online /Cleanup-Image /RestoreHealth"),
    ]


def test_updates_default_to_apply(make_orchestrator, invoker):
    command = UpdatesCommand()

    assert command.mode is Mode.APPLY
    assert command.run_workflow(
        None, make_orchestrator(invoker)
    ) == EXIT_HEALTHY
    assert invoker.calls == [
        ("Dism.exe", "/Online /Cleanup-Image /StartComponentCleanup"),
    ]


def test_updates_verify_only_analyzes(make_orchestrator, make_invoker, capsys):
    invoker = make_invoker({"Dism.exe": 1})
    command = UpdatesCommand(mode=Mode.VERIFY_ONLY)

    code = command.run_workflow(None, make_orchestrator(invoker))

    assert code == EXIT_ISSUES
    assert invoker.calls == [
        ("Dism.exe", "/Online /Cleanup-Image /AnalyzeComponentStore"),
    ]
    report = json.loads(capsys.readouterr().out)
    assert report["ComponentStoreCleanup"]["mode"] == "verify"


def test_empty_operations_select_everything():
    from hostmend.maintenance.catalog import ALL

    assert ChecksCommand().selection is ALL
    assert ChecksCommand(
        operations=[OperationName.FILE_SYSTEM_SCAN]
    ).selection == [OperationName.FILE_SYSTEM_SCAN]


def test_base_command_cannot_be_instantiated():
    from hostmend.command.base import MaintenanceCommand

    with pytest.raises(TypeError):
        MaintenanceCommand()
