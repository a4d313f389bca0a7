from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from dineflow.application.dto.requests import AddWaitlistRequest, UpdateWaitlistRequest
from dineflow.application.dto.responses import (
    SeatWaitlistResponse,
    WaitlistEntryResponse,
    WaitlistResponse,
)
from dineflow.application.mappers.event_envelope import serialize_waitlist_event
from dineflow.application.mappers.waitlist_mapper import to_waitlist_entry_response
from dineflow.application.metrics.lifecycle import record_waitlist_size
from dineflow.application.ports.publisher import EventPublisher
from dineflow.application.ports.repositories import TableRepository, WaitlistRepository
from dineflow.application.use_cases.context import EMPTY_TRACE, TraceContext
from dineflow.application.use_cases.floor import AllocateTable
from dineflow.application.use_cases.publishing import publish_event
from dineflow.domain.common.ids import TableId, WaitlistEntryId
from dineflow.domain.table.entities import TableStatus
from dineflow.domain.waitlist.entities import InvalidPartySizeError as DomainInvalidPartySizeError
from dineflow.domain.waitlist.entities import (
    WaitlistEntry,
    WaitlistStatus,
    estimate_wait_minutes,
    validate_party_size,
)

logger = logging.getLogger(__name__)


class WaitlistEntryNotFoundError(Exception):
    pass


class WaitlistEntryNotWaitingError(Exception):
    pass


class InvalidPartySizeError(Exception):
    pass


def count_available_tables(table_repository: TableRepository) -> int:
    return sum(1 for table in table_repository.list_tables() if table.status == TableStatus.AVAILABLE)


def waiting_entries(waitlist_repository: WaitlistRepository) -> list[WaitlistEntry]:
    entries = waitlist_repository.list_entries(status=WaitlistStatus.WAITING)
    entries.sort(key=lambda entry: entry.created_at)
    return entries


class AddToWaitlist:
    def __init__(
        self,
        waitlist_repository: WaitlistRepository,
        table_repository: TableRepository,
        publisher: EventPublisher,
    ) -> None:
        self._waitlist_repository = waitlist_repository
        self._table_repository = table_repository
        self._publisher = publisher

    def execute(
        self,
        request_dto: AddWaitlistRequest,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> WaitlistEntryResponse:
        try:
            validate_party_size(request_dto.party_size)
        except DomainInvalidPartySizeError as exc:
            raise InvalidPartySizeError(str(exc)) from exc

        waiting = waiting_entries(self._waitlist_repository)
        estimate = estimate_wait_minutes(
            len(waiting) + 1,
            count_available_tables(self._table_repository),
        )
        entry = WaitlistEntry(
            entry_id=WaitlistEntryId(f"wl_{uuid4().hex[:12]}"),
            party_name=request_dto.party_name,
            party_size=request_dto.party_size,
            created_at=datetime.now(timezone.utc),
            estimated_wait_minutes=estimate,
            phone=request_dto.phone,
        )
        self._waitlist_repository.add(entry)
        record_waitlist_size(len(waiting) + 1)
        logger.info(
            "waitlist_added",
            extra={"entry_id": entry.entry_id, "party_size": entry.party_size},
        )
        message = serialize_waitlist_event(
            event_type="waitlist.added",
            occurred_at=entry.created_at,
            entry=entry,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        publish_event(self._publisher, "waitlist.added", message)
        return to_waitlist_entry_response(entry)


class ListWaitlist:
    def __init__(
        self,
        waitlist_repository: WaitlistRepository,
        table_repository: TableRepository,
    ) -> None:
        self._waitlist_repository = waitlist_repository
        self._table_repository = table_repository

    def execute(self) -> WaitlistResponse:
        entries = waiting_entries(self._waitlist_repository)
        estimate = estimate_wait_minutes(
            len(entries),
            count_available_tables(self._table_repository),
        )
        return WaitlistResponse(
            entries=[to_waitlist_entry_response(entry) for entry in entries],
            estimatedWaitMinutes=estimate,
        )


class RemoveFromWaitlist:
    """Takes a party off the waitlist. Removing an unknown or closed entry is a no-op."""

    def __init__(self, waitlist_repository: WaitlistRepository, publisher: EventPublisher) -> None:
        self._waitlist_repository = waitlist_repository
        self._publisher = publisher

    def execute(
        self,
        entry_id: WaitlistEntryId,
        reason: WaitlistStatus = WaitlistStatus.CANCELLED,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> None:
        entry = self._waitlist_repository.get(entry_id)
        if entry is None or not entry.is_waiting:
            return
        closed = entry.close(reason)
        self._waitlist_repository.update(closed)
        record_waitlist_size(len(waiting_entries(self._waitlist_repository)))
        logger.info(
            "waitlist_removed",
            extra={"entry_id": closed.entry_id, "reason": reason.value},
        )
        message = serialize_waitlist_event(
            event_type="waitlist.removed",
            occurred_at=datetime.now(timezone.utc),
            entry=closed,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        publish_event(self._publisher, "waitlist.removed", message)


class UpdateWaitlistEntry:
    def __init__(self, waitlist_repository: WaitlistRepository) -> None:
        self._waitlist_repository = waitlist_repository

    def execute(
        self,
        entry_id: WaitlistEntryId,
        request_dto: UpdateWaitlistRequest,
    ) -> WaitlistEntryResponse:
        entry = self._waitlist_repository.get(entry_id)
        if entry is None:
            raise WaitlistEntryNotFoundError(f"waitlist entry not found for entry_id={entry_id}")
        if request_dto.notified and not entry.notified:
            entry = entry.mark_notified()
            self._waitlist_repository.update(entry)
        return to_waitlist_entry_response(entry)


class SeatWaitlistParty:
    def __init__(
        self,
        waitlist_repository: WaitlistRepository,
        allocate_table: AllocateTable,
        remove_from_waitlist: RemoveFromWaitlist,
    ) -> None:
        self._waitlist_repository = waitlist_repository
        self._allocate_table = allocate_table
        self._remove_from_waitlist = remove_from_waitlist

    def execute(
        self,
        entry_id: WaitlistEntryId,
        table_id: TableId,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> SeatWaitlistResponse:
        entry = self._waitlist_repository.get(entry_id)
        if entry is None:
            raise WaitlistEntryNotFoundError(f"waitlist entry not found for entry_id={entry_id}")
        if not entry.is_waiting:
            raise WaitlistEntryNotWaitingError(
                f"waitlist entry {entry_id} is already {entry.status.value}"
            )

        table = self._allocate_table.execute(
            table_id,
            entry.party_name,
            entry.party_size,
            trace_ctx=trace_ctx,
        )
        self._remove_from_waitlist.execute(entry_id, WaitlistStatus.SEATED, trace_ctx=trace_ctx)
        seated = self._waitlist_repository.get(entry_id) or entry.close(WaitlistStatus.SEATED)
        return SeatWaitlistResponse(entry=to_waitlist_entry_response(seated), table=table)
