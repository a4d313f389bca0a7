from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from dineflow.domain.common.ids import TableId


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    CLEANING = "cleaning"


SEATED_STATUSES = frozenset({TableStatus.OCCUPIED, TableStatus.RESERVED})


@dataclass(frozen=True)
class Occupant:
    party_name: str
    party_size: int
    seated_at: datetime

    def __post_init__(self) -> None:
        if not self.party_name.strip():
            raise ValueError("party_name must be non-empty")
        if self.party_size < 1:
            raise ValueError("party_size must be >= 1")


@dataclass(frozen=True)
class TablePosition:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Table:
    table_id: TableId
    number: int
    capacity: int
    status: TableStatus
    occupant: Occupant | None = None
    position: TablePosition = TablePosition()
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError("number must be > 0")
        if self.capacity < 1:
            raise ValueError("capacity must be > 0")
        if self.occupant is not None and self.status not in SEATED_STATUSES:
            raise ValueError(f"a {self.status.value} table cannot have an occupant")
        if self.status == TableStatus.RESERVED and self.occupant is None:
            raise ValueError("a reserved table must name the party it is held for")

    def with_status(self, new_status: TableStatus, now: datetime) -> Table:
        # The occupant survives only while the table stays seated or held.
        if new_status == TableStatus.OCCUPIED and self.status == TableStatus.OCCUPIED:
            raise TableTransitionError(
                f"table {self.number} is already occupied; release it before seating again"
            )
        if new_status == TableStatus.RESERVED and self.occupant is None:
            raise TableTransitionError(
                f"table {self.number} has no party to hold; reserve it for a named party instead"
            )
        occupant = self.occupant if new_status in SEATED_STATUSES else None
        return replace(self, status=new_status, occupant=occupant, updated_at=now)

    def allocate(self, party_name: str, party_size: int, now: datetime) -> Table:
        return self._seat(TableStatus.OCCUPIED, party_name, party_size, now)

    def reserve(self, party_name: str, party_size: int, now: datetime) -> Table:
        return self._seat(TableStatus.RESERVED, party_name, party_size, now)

    def release(self, now: datetime) -> Table:
        return replace(self, status=TableStatus.AVAILABLE, occupant=None, updated_at=now)

    def apply(self, update: TableUpdate, now: datetime) -> Table:
        updated = self
        if update.capacity is not None:
            updated = replace(updated, capacity=update.capacity, updated_at=now)
        if update.position is not None:
            updated = replace(updated, position=update.position, updated_at=now)
        if update.status is not None:
            updated = updated.with_status(update.status, now)
        return updated

    def _seat(
        self,
        status: TableStatus,
        party_name: str,
        party_size: int,
        now: datetime,
    ) -> Table:
        if party_size > self.capacity:
            raise CapacityExceededError(
                f"party of {party_size} exceeds capacity {self.capacity} of table {self.number}"
            )
        if self.status != TableStatus.AVAILABLE:
            raise TableNotAvailableError(
                f"table {self.number} is {self.status.value}, not available"
            )
        occupant = Occupant(party_name=party_name, party_size=party_size, seated_at=now)
        return replace(self, status=status, occupant=occupant, updated_at=now)


@dataclass(frozen=True)
class TableUpdate:
    status: TableStatus | None = None
    capacity: int | None = None
    position: TablePosition | None = None


class TableTransitionError(Exception):
    pass


class CapacityExceededError(Exception):
    pass


class TableNotAvailableError(Exception):
    pass
