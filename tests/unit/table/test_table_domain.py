from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dineflow.domain.common.ids import TableId
from dineflow.domain.table.entities import (
    CapacityExceededError,
    Occupant,
    Table,
    TableNotAvailableError,
    TablePosition,
    TableStatus,
    TableTransitionError,
    TableUpdate,
)

NOW = datetime(2026, 10, 1, 19, 0, tzinfo=timezone.utc)


def _table(status: TableStatus = TableStatus.AVAILABLE, capacity: int = 4) -> Table:
    return Table(table_id=TableId("tbl_005"), number=5, capacity=capacity, status=status)


def test_available_table_cannot_carry_an_occupant() -> None:
    with pytest.raises(ValueError):
        Table(
            table_id=TableId("tbl_005"),
            number=5,
            capacity=4,
            status=TableStatus.AVAILABLE,
            occupant=Occupant(party_name="Diaz", party_size=2, seated_at=NOW),
        )


@pytest.mark.parametrize("number, capacity", [(0, 4), (5, 0)])
def test_number_and_capacity_must_be_positive(number: int, capacity: int) -> None:
    with pytest.raises(ValueError):
        Table(table_id=TableId("tbl_x"), number=number, capacity=capacity, status=TableStatus.AVAILABLE)


def test_allocate_seats_party_and_marks_table_occupied() -> None:
    seated = _table().allocate("Diaz", 3, NOW)

    assert seated.status == TableStatus.OCCUPIED
    assert seated.occupant == Occupant(party_name="Diaz", party_size=3, seated_at=NOW)
    assert seated.updated_at == NOW


def test_allocate_checks_capacity_before_availability() -> None:
    seated = _table().allocate("Diaz", 3, NOW)

    with pytest.raises(CapacityExceededError):
        seated.allocate("Lee", 6, NOW)


def test_allocate_rejects_table_that_is_not_available() -> None:
    seated = _table().allocate("Diaz", 3, NOW)

    with pytest.raises(TableNotAvailableError):
        seated.allocate("Lee", 2, NOW)


def test_party_exactly_at_capacity_fits() -> None:
    assert _table(capacity=4).allocate("Diaz", 4, NOW).occupant is not None


def test_reserve_sets_reserved_with_occupant() -> None:
    reserved = _table().reserve("Kim", 2, NOW)

    assert reserved.status == TableStatus.RESERVED
    assert reserved.occupant is not None
    assert reserved.occupant.party_name == "Kim"


def test_release_clears_occupant() -> None:
    released = _table().allocate("Diaz", 3, NOW).release(NOW)

    assert released.status == TableStatus.AVAILABLE
    assert released.occupant is None


def test_status_overwrite_off_the_floor_clears_occupant() -> None:
    seated = _table().allocate("Diaz", 3, NOW)

    cleaned = seated.with_status(TableStatus.CLEANING, NOW)
    assert cleaned.status == TableStatus.CLEANING
    assert cleaned.occupant is None

    assert seated.with_status(TableStatus.AVAILABLE, NOW).occupant is None


def test_status_overwrite_between_seated_states_keeps_occupant() -> None:
    held = _table().reserve("Okafor", 2, NOW).with_status(TableStatus.OCCUPIED, NOW)

    assert held.status == TableStatus.OCCUPIED
    assert held.occupant is not None
    assert held.occupant.party_name == "Okafor"


def test_status_overwrite_to_reserved_needs_a_party() -> None:
    with pytest.raises(TableTransitionError):
        _table().with_status(TableStatus.RESERVED, NOW)

    with pytest.raises(TableTransitionError):
        _table(TableStatus.CLEANING).with_status(TableStatus.RESERVED, NOW)


def test_only_seated_tables_carry_an_occupant() -> None:
    occupant = Occupant(party_name="Diaz", party_size=2, seated_at=NOW)

    with pytest.raises(ValueError):
        Table(
            table_id=TableId("tbl_005"),
            number=5,
            capacity=4,
            status=TableStatus.CLEANING,
            occupant=occupant,
        )
    with pytest.raises(ValueError):
        Table(table_id=TableId("tbl_005"), number=5, capacity=4, status=TableStatus.RESERVED)


def test_status_overwrite_is_unguarded_except_reoccupying() -> None:
    table = _table().with_status(TableStatus.CLEANING, NOW)
    assert table.status == TableStatus.CLEANING

    occupied = table.with_status(TableStatus.OCCUPIED, NOW)
    assert occupied.status == TableStatus.OCCUPIED
    assert occupied.occupant is None

    with pytest.raises(TableTransitionError):
        occupied.with_status(TableStatus.OCCUPIED, NOW)


def test_apply_updates_layout_and_capacity() -> None:
    updated = _table().apply(
        TableUpdate(capacity=6, position=TablePosition(x=2.5, y=1.0)),
        NOW,
    )

    assert updated.capacity == 6
    assert updated.position == TablePosition(x=2.5, y=1.0)
    assert updated.status == TableStatus.AVAILABLE
