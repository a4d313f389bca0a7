from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dineflow.domain.common.ids import ReservationId, TableId
from dineflow.domain.reservation.entities import (
    Reservation,
    ReservationStatus,
    ReservationTransitionError,
    ReservationUpdate,
)
from dineflow.domain.waitlist.entities import InvalidPartySizeError

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _reservation(status: ReservationStatus = ReservationStatus.PENDING) -> Reservation:
    return Reservation(
        reservation_id=ReservationId("rsv_001"),
        customer_name="Okafor",
        party_size=4,
        reserved_for=NOW + timedelta(days=1),
        created_at=NOW,
        updated_at=NOW,
        status=status,
    )


def test_new_reservation_is_pending_and_open() -> None:
    reservation = _reservation()

    assert reservation.status == ReservationStatus.PENDING
    assert reservation.is_open


@pytest.mark.parametrize(
    ("start", "target"),
    [
        (ReservationStatus.PENDING, ReservationStatus.CONFIRMED),
        (ReservationStatus.PENDING, ReservationStatus.CANCELLED),
        (ReservationStatus.CONFIRMED, ReservationStatus.SEATED),
        (ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED),
    ],
)
def test_allowed_transitions(start: ReservationStatus, target: ReservationStatus) -> None:
    later = NOW + timedelta(minutes=5)

    moved = _reservation(start).transition(target, later)

    assert moved.status == target
    assert moved.updated_at == later


@pytest.mark.parametrize(
    ("start", "target"),
    [
        (ReservationStatus.CANCELLED, ReservationStatus.CONFIRMED),
        (ReservationStatus.SEATED, ReservationStatus.CANCELLED),
        (ReservationStatus.CONFIRMED, ReservationStatus.PENDING),
    ],
)
def test_closed_or_backward_transitions_are_rejected(
    start: ReservationStatus,
    target: ReservationStatus,
) -> None:
    with pytest.raises(ReservationTransitionError):
        _reservation(start).transition(target, NOW)


def test_amend_reschedules_an_open_reservation() -> None:
    later = NOW + timedelta(days=2)

    amended = _reservation().amend(
        ReservationUpdate(reserved_for=later, table_id=TableId("tbl_003"), notes="birthday"),
        NOW,
    )

    assert amended.reserved_for == later
    assert amended.table_id == "tbl_003"
    assert amended.notes == "birthday"
    assert amended.status == ReservationStatus.PENDING


def test_cancelled_reservation_cannot_be_rescheduled() -> None:
    with pytest.raises(ReservationTransitionError):
        _reservation(ReservationStatus.CANCELLED).amend(ReservationUpdate(party_size=2), NOW)


def test_reservation_needs_an_aware_time_and_a_valid_party() -> None:
    with pytest.raises(ValueError):
        Reservation(
            reservation_id=ReservationId("rsv_001"),
            customer_name="Okafor",
            party_size=2,
            reserved_for=datetime(2026, 10, 19, 19, 0),
            created_at=NOW,
            updated_at=NOW,
        )
    with pytest.raises(InvalidPartySizeError):
        Reservation(
            reservation_id=ReservationId("rsv_001"),
            customer_name="Okafor",
            party_size=21,
            reserved_for=NOW + timedelta(days=1),
            created_at=NOW,
            updated_at=NOW,
        )
