"""Static catalog of maintenance operations.

Catalog order is execution order. An entry supports exactly the modes
it has arguments for; mode-variant pairs such as ComponentStoreScan and
ComponentStoreRepair share a tool but pin different modes. Naming
either half of a pair selects the task; the mode picks the half that
runs.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from hostmend.core.errors import InvalidSelection
from hostmend.core.result import Mode, OperationName
from hostmend.maintenance.classify import ToolFamily


class _All(Enum):
    ALL = "all"


ALL = _All.ALL
"""Selection sentinel: every operation of the entry point for the mode."""

EntryPoint = Literal["checks", "updates"]
Selection = Iterable[OperationName] | _All

# Tools living in the system directory (System32)
CHKDSK = "chkdsk.exe"
SFC = "sfc.exe"
DISM = "Dism.exe"


class CatalogEntry(BaseModel):
    """Binding of one operation to its tool and arguments."""

    model_config = ConfigDict(frozen=True)

    name: OperationName
    family: ToolFamily
    entry_point: EntryPoint
    # File name in the system directory; None for update-source operations
    executable: str | None = None
    arguments: dict[Mode, str]
    requires_elevation: bool = True

    @property
    def modes(self) -> frozenset[Mode]:
        return frozenset(self.arguments)

    def argument_string(self, mode: Mode, volume: str) -> str:
        return self.arguments[mode].format(volume=volume)


CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry(
        name=OperationName.FILE_SYSTEM_SCAN,
        family=ToolFamily.FILESYSTEM_CHECK,
        entry_point="checks",
        executable=CHKDSK,
        arguments={
            Mode.VERIFY_ONLY: "{volume} /scan",
            Mode.APPLY: "{volume} /scan /forceofflinefix",
        },
    ),
    CatalogEntry(
        name=OperationName.SYSTEM_FILE_CHECK,
        family=ToolFamily.SYSTEM_FILE_CHECK,
        entry_point="checks",
        executable=SFC,
        arguments={
            Mode.VERIFY_ONLY: "/verifyonly",
            Mode.APPLY: "/scannow",
        },
    ),
    CatalogEntry(
        name=OperationName.COMPONENT_STORE_SCAN,
        family=ToolFamily.COMPONENT_STORE_SCAN,
        entry_point="checks",
        executable=DISM,
        arguments={
            Mode.VERIFY_ONLY: "/Online /Cleanup-Image /ScanHealth",
        },
    ),
    CatalogEntry(
        name=OperationName.COMPONENT_STORE_REPAIR,
        family=ToolFamily.COMPONENT_STORE_SERVICING,
        entry_point="checks",
        executable=DISM,
        arguments={
            Mode.APPLY: "/Online /Cleanup-Image /RestoreHealth",
        },
    ),
    CatalogEntry(
        name=OperationName.WINDOWS_UPDATE_CHECK,
        family=ToolFamily.WINDOWS_UPDATE,
        entry_point="checks",
        arguments={Mode.VERIFY_ONLY: ""},
        requires_elevation=False,
    ),
    CatalogEntry(
        name=OperationName.WINDOWS_UPDATE_APPLY,
        family=ToolFamily.WINDOWS_UPDATE,
        entry_point="checks",
        arguments={Mode.APPLY: ""},
    ),
    CatalogEntry(
        name=OperationName.COMPONENT_STORE_CLEANUP,
        family=ToolFamily.COMPONENT_STORE_SERVICING,
        entry_point="updates",
        executable=DISM,
        arguments={
            Mode.VERIFY_ONLY: "/Online /Cleanup-Image /AnalyzeComponentStore",
            Mode.APPLY: "/Online /Cleanup-Image /StartComponentCleanup",
        },
    ),
)

_BY_NAME = {e.name: e for e in CATALOG}

# Operations that are the verify and apply halves of one task
VARIANTS: tuple[tuple[OperationName, OperationName], ...] = (
    (
        OperationName.COMPONENT_STORE_SCAN,
        OperationName.COMPONENT_STORE_REPAIR,
    ),
    (
        OperationName.WINDOWS_UPDATE_CHECK,
        OperationName.WINDOWS_UPDATE_APPLY,
    ),
)


def entry(name: OperationName) -> CatalogEntry:
    return _BY_NAME[name]


def entries_for(entry_point: EntryPoint) -> list[CatalogEntry]:
    return [e for e in CATALOG if e.entry_point == entry_point]


def variant(name: OperationName, mode: Mode) -> CatalogEntry:
    """Return the entry that carries out name in mode.

    Mode-variant pairs stand in for each other: asking for
    ComponentStoreScan in apply mode runs ComponentStoreRepair, and
    asking for WindowsUpdateApply in verify mode runs
    WindowsUpdateCheck.

    Raises:
        InvalidSelection: If name has no variant that runs in mode
    """
    e = entry(name)
    if mode in e.modes:
        return e
    for pair in VARIANTS:
        if name in pair:
            for sibling in pair:
                if mode in entry(sibling).modes:
                    return entry(sibling)
    raise InvalidSelection(f"{name.value} does not run in {mode.value} mode")


def resolve(
    entry_point: EntryPoint,
    selection: Selection,
    mode: Mode,
) -> list[tuple[OperationName, CatalogEntry]]:
    """Turn a caller selection into (slot, entry) pairs in catalog order.

    The slot is the operation the caller asked for; the entry is what
    runs for it in mode. They differ only for mode-variant pairs.

    Raises:
        InvalidSelection: If a name belongs to the other entry point
    """
    if selection is ALL:
        return [
            (e.name, e)
            for e in entries_for(entry_point)
            if mode in e.modes
        ]

    wanted = {OperationName(name) for name in selection}
    for name in wanted:
        if entry(name).entry_point != entry_point:
            raise InvalidSelection(
                f"{name.value} is not available from '{entry_point}'"
            )
    return [
        (e.name, variant(e.name, mode)) for e in CATALOG if e.name in wanted
    ]
