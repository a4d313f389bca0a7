from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from dineflow.domain.common.ids import ReservationId, TableId, UserId
from dineflow.domain.waitlist.entities import validate_party_size


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    CANCELLED = "cancelled"


RESERVATION_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.SEATED, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.SEATED, ReservationStatus.CANCELLED}),
    ReservationStatus.SEATED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class Reservation:
    """A booking for a future time, optionally pinned to a table.

    Holding the table itself only happens when the party is seated.
    """

    reservation_id: ReservationId
    customer_name: str
    party_size: int
    reserved_for: datetime
    created_at: datetime
    updated_at: datetime
    status: ReservationStatus = ReservationStatus.PENDING
    phone: str | None = None
    table_id: TableId | None = None
    notes: str | None = None
    customer_id: UserId | None = None

    def __post_init__(self) -> None:
        if not self.customer_name.strip():
            raise ValueError("customer_name must be non-empty")
        validate_party_size(self.party_size)
        if self.reserved_for.tzinfo is None:
            raise ValueError("reserved_for must be timezone-aware")

    @property
    def is_open(self) -> bool:
        return bool(RESERVATION_TRANSITIONS[self.status])

    def transition(self, new_status: ReservationStatus, now: datetime) -> Reservation:
        if new_status == self.status:
            return self
        if new_status not in RESERVATION_TRANSITIONS[self.status]:
            raise ReservationTransitionError(
                f"cannot move reservation {self.reservation_id} "
                f"from {self.status.value} to {new_status.value}"
            )
        return replace(self, status=new_status, updated_at=now)

    def amend(self, update: ReservationUpdate, now: datetime) -> Reservation:
        changes: dict[str, object] = {}
        if update.reserved_for is not None:
            changes["reserved_for"] = update.reserved_for
        if update.party_size is not None:
            changes["party_size"] = update.party_size
        if update.table_id is not None:
            changes["table_id"] = update.table_id
        if update.notes is not None:
            changes["notes"] = update.notes
        if update.phone is not None:
            changes["phone"] = update.phone

        amended = self
        if changes:
            if not self.is_open:
                raise ReservationTransitionError(
                    f"reservation {self.reservation_id} is {self.status.value} and can no longer change"
                )
            amended = replace(self, updated_at=now, **changes)
        if update.status is not None:
            amended = amended.transition(update.status, now)
        return amended


@dataclass(frozen=True)
class ReservationUpdate:
    reserved_for: datetime | None = None
    party_size: int | None = None
    table_id: TableId | None = None
    notes: str | None = None
    phone: str | None = None
    status: ReservationStatus | None = None


class ReservationTransitionError(Exception):
    pass
