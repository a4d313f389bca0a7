from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from dineflow.domain.common.ids import WaitlistEntryId

MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 20
MINUTES_PER_PARTY = 15


class WaitlistStatus(str, Enum):
    WAITING = "waiting"
    SEATED = "seated"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class WaitlistEntry:
    entry_id: WaitlistEntryId
    party_name: str
    party_size: int
    created_at: datetime
    estimated_wait_minutes: int
    status: WaitlistStatus = WaitlistStatus.WAITING
    phone: str | None = None
    notified: bool = False

    def __post_init__(self) -> None:
        if not self.party_name.strip():
            raise ValueError("party_name must be non-empty")
        validate_party_size(self.party_size)
        if self.estimated_wait_minutes < 0:
            raise ValueError("estimated_wait_minutes must be >= 0")

    @property
    def is_waiting(self) -> bool:
        return self.status == WaitlistStatus.WAITING

    def close(self, status: WaitlistStatus) -> WaitlistEntry:
        if status == WaitlistStatus.WAITING:
            raise ValueError("closing status must be seated or cancelled")
        return replace(self, status=status)

    def mark_notified(self) -> WaitlistEntry:
        return replace(self, notified=True)


def validate_party_size(party_size: int) -> None:
    if party_size < MIN_PARTY_SIZE or party_size > MAX_PARTY_SIZE:
        raise InvalidPartySizeError(
            f"party size must be between {MIN_PARTY_SIZE} and {MAX_PARTY_SIZE}, got {party_size}"
        )


def estimate_wait_minutes(waitlist_length: int, available_table_count: int) -> int:
    """Linear heuristic: fifteen minutes per waiting party, shared across free tables."""
    return math.ceil(waitlist_length * MINUTES_PER_PARTY / max(1, available_table_count))


class InvalidPartySizeError(Exception):
    pass
