from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dineflow.domain.common.ids import WaitlistEntryId
from dineflow.domain.waitlist.entities import (
    InvalidPartySizeError,
    WaitlistEntry,
    WaitlistStatus,
    estimate_wait_minutes,
    validate_party_size,
)

NOW = datetime(2026, 10, 1, 19, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "waiting, available, expected",
    [
        (3, 0, 45),
        (3, 1, 45),
        (3, 2, 23),
        (0, 4, 0),
        (1, 4, 4),
    ],
)
def test_estimate_is_fifteen_minutes_per_party_over_free_tables(
    waiting: int, available: int, expected: int
) -> None:
    assert estimate_wait_minutes(waiting, available) == expected


@pytest.mark.parametrize("party_size", [0, 21, -3])
def test_party_size_outside_bounds_is_rejected(party_size: int) -> None:
    with pytest.raises(InvalidPartySizeError):
        validate_party_size(party_size)


@pytest.mark.parametrize("party_size", [1, 20])
def test_party_size_bounds_are_inclusive(party_size: int) -> None:
    validate_party_size(party_size)


def test_close_moves_entry_out_of_waiting() -> None:
    entry = WaitlistEntry(
        entry_id=WaitlistEntryId("wl_001"),
        party_name="Okafor",
        party_size=4,
        created_at=NOW,
        estimated_wait_minutes=15,
    )

    seated = entry.close(WaitlistStatus.SEATED)

    assert entry.is_waiting
    assert not seated.is_waiting
    assert seated.status == WaitlistStatus.SEATED
    with pytest.raises(ValueError):
        entry.close(WaitlistStatus.WAITING)
