"""Tests for the operation catalog."""

import pytest

from hostmend.core.errors import InvalidSelection
from hostmend.core.result import SLOTS, Mode, OperationName
from hostmend.maintenance import catalog
from hostmend.maintenance.catalog import ALL, CATALOG, resolve


def names(entries):
    return [e.name for e in entries]


def slots(planned):
    return [slot for slot, _ in planned]


def runs(planned):
    return [e.name for _, e in planned]


def test_every_operation_has_exactly_one_entry():
    assert sorted(names(CATALOG)) == sorted(OperationName)


def test_catalog_order_matches_report_order():
    assert names(CATALOG) == list(SLOTS)


def test_every_entry_supports_a_mode():
    for entry in CATALOG:
        assert entry.modes
        assert entry.modes <= set(Mode)


def test_all_checks_in_verify_mode():
    """Verify mode picks the check-only variants."""
    assert slots(resolve("checks", ALL, Mode.VERIFY_ONLY)) == [
        OperationName.FILE_SYSTEM_SCAN,
        OperationName.SYSTEM_FILE_CHECK,
        OperationName.COMPONENT_STORE_SCAN,
        OperationName.WINDOWS_UPDATE_CHECK,
    ]


def test_all_checks_in_apply_mode():
    """Apply mode picks the repairing variants."""
    assert slots(resolve("checks", ALL, Mode.APPLY)) == [
        OperationName.FILE_SYSTEM_SCAN,
        OperationName.SYSTEM_FILE_CHECK,
        OperationName.COMPONENT_STORE_REPAIR,
        OperationName.WINDOWS_UPDATE_APPLY,
    ]


@pytest.mark.parametrize("mode", list(Mode))
def test_all_updates(mode):
    assert slots(resolve("updates", ALL, mode)) == [
        OperationName.COMPONENT_STORE_CLEANUP
    ]


def test_explicit_selection_follows_catalog_order():
    selection = [
        OperationName.WINDOWS_UPDATE_CHECK,
        OperationName.FILE_SYSTEM_SCAN,
        OperationName.SYSTEM_FILE_CHECK,
        OperationName.FILE_SYSTEM_SCAN,
    ]

    assert slots(resolve("checks", selection, Mode.VERIFY_ONLY)) == [
        OperationName.FILE_SYSTEM_SCAN,
        OperationName.SYSTEM_FILE_CHECK,
        OperationName.WINDOWS_UPDATE_CHECK,
    ]


def test_selection_accepts_operation_values():
    planned = resolve("checks", ["SystemFileCheck"], Mode.APPLY)

    assert slots(planned) == [OperationName.SYSTEM_FILE_CHECK]


def test_empty_selection_resolves_to_nothing():
    assert resolve("checks", [], Mode.VERIFY_ONLY) == []


def test_operation_from_other_entry_point_is_rejected():
    with pytest.raises(InvalidSelection, match="ComponentStoreCleanup"):
        resolve(
            "checks",
            [OperationName.COMPONENT_STORE_CLEANUP],
            Mode.APPLY,
        )


def test_verify_mode_runs_scan_for_repair():
    """Naming the repair half in verify mode runs the scan half."""
    planned = resolve(
        "checks", [OperationName.COMPONENT_STORE_REPAIR], Mode.VERIFY_ONLY
    )

    assert slots(planned) == [OperationName.COMPONENT_STORE_REPAIR]
    assert runs(planned) == [OperationName.COMPONENT_STORE_SCAN]


@pytest.mark.parametrize(
    ("name", "mode", "expected"),
    [
        (
            OperationName.COMPONENT_STORE_SCAN,
            Mode.APPLY,
            OperationName.COMPONENT_STORE_REPAIR,
        ),
        (
            OperationName.WINDOWS_UPDATE_CHECK,
            Mode.APPLY,
            OperationName.WINDOWS_UPDATE_APPLY,
        ),
        (
            OperationName.WINDOWS_UPDATE_APPLY,
            Mode.VERIFY_ONLY,
            OperationName.WINDOWS_UPDATE_CHECK,
        ),
        (
            OperationName.SYSTEM_FILE_CHECK,
            Mode.APPLY,
            OperationName.SYSTEM_FILE_CHECK,
        ),
    ],
)
def test_variant_follows_mode(name, mode, expected):
    assert catalog.variant(name, mode).name is expected


def test_every_operation_runs_in_every_mode():
    for name in OperationName:
        for mode in Mode:
            assert mode in catalog.variant(name, mode).modes


def test_filesystem_scan_arguments_use_volume():
    entry = catalog.entry(OperationName.FILE_SYSTEM_SCAN)

    assert entry.argument_string(Mode.VERIFY_ONLY, "D:") == "D: /scan"
    assert entry.argument_string(Mode.APPLY, "D:").startswith("D: /scan")


def test_only_update_listing_runs_unelevated():
    unprivileged = [e.name for e in CATALOG if not e.requires_elevation]

    assert unprivileged == [OperationName.WINDOWS_UPDATE_CHECK]
