from __future__ import annotations

import logging
from datetime import datetime, timezone
from urllib.parse import urlencode
from uuid import uuid4

from dineflow.application.dto.requests import CreateTableRequest, UpdateTableRequest
from dineflow.application.dto.responses import (
    TableListResponse,
    TableQrCodeResponse,
    TableResponse,
)
from dineflow.application.mappers.event_envelope import serialize_table_event
from dineflow.application.mappers.table_mapper import to_table_response
from dineflow.application.metrics.lifecycle import (
    record_seat_rejected,
    record_table_status_change,
)
from dineflow.application.ports.publisher import EventPublisher
from dineflow.application.ports.repositories import TableRepository
from dineflow.application.use_cases.context import EMPTY_TRACE, TraceContext
from dineflow.application.use_cases.publishing import publish_event
from dineflow.domain.common.ids import TableId
from dineflow.domain.table.entities import CapacityExceededError as DomainCapacityExceededError
from dineflow.domain.table.entities import (
    Table,
    TablePosition,
    TableStatus,
    TableTransitionError,
    TableUpdate,
)
from dineflow.domain.table.entities import TableNotAvailableError as DomainTableNotAvailableError

logger = logging.getLogger(__name__)


class TableNotFoundError(Exception):
    pass


class TableNotAvailableError(TableNotFoundError):
    pass


class CapacityExceededError(Exception):
    pass


class DuplicateTableNumberError(Exception):
    pass


class InvalidTableTransitionError(Exception):
    pass


def _load_table(table_repository: TableRepository, table_id: TableId) -> Table:
    table = table_repository.get(table_id)
    if table is None:
        raise TableNotFoundError(f"table not found for table_id={table_id}")
    return table


def _announce(
    publisher: EventPublisher,
    table: Table,
    previous_status: TableStatus,
    trace_ctx: TraceContext,
) -> None:
    if previous_status != table.status:
        record_table_status_change(previous_status, table.status)
    message = serialize_table_event(
        occurred_at=table.updated_at or datetime.now(timezone.utc),
        table=table,
        previous_status=previous_status.value,
        trace_id=trace_ctx.trace_id,
        request_id=trace_ctx.request_id,
    )
    publish_event(publisher, "table.status_changed", message)


class CreateTable:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, request_dto: CreateTableRequest) -> TableResponse:
        if self._table_repository.get_by_number(request_dto.number) is not None:
            raise DuplicateTableNumberError(f"table number {request_dto.number} already exists")

        position = TablePosition()
        if request_dto.position is not None:
            position = TablePosition(x=request_dto.position.x, y=request_dto.position.y)
        table = Table(
            table_id=TableId(f"tbl_{uuid4().hex[:12]}"),
            number=request_dto.number,
            capacity=request_dto.capacity,
            status=TableStatus.AVAILABLE,
            position=position,
            updated_at=datetime.now(timezone.utc),
        )
        self._table_repository.save(table)
        logger.info("table_created", extra={"table_id": table.table_id, "number": table.number})
        return to_table_response(table)


class ListTables:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, status: TableStatus | None = None) -> TableListResponse:
        tables = self._table_repository.list_tables()
        if status is not None:
            tables = [table for table in tables if table.status == status]
        tables.sort(key=lambda table: table.number)
        return TableListResponse(tables=[to_table_response(table) for table in tables])


class GetTable:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, table_id: TableId) -> TableResponse:
        return to_table_response(_load_table(self._table_repository, table_id))


class UpdateTable:
    """Applies staff edits to a table.

    Status overwrites are unguarded except for seating an already occupied table.
    Returning to ``available`` clears the occupant.
    """

    def __init__(self, table_repository: TableRepository, publisher: EventPublisher) -> None:
        self._table_repository = table_repository
        self._publisher = publisher

    def execute(
        self,
        table_id: TableId,
        request_dto: UpdateTableRequest,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> TableResponse:
        position = None
        if request_dto.position is not None:
            position = TablePosition(x=request_dto.position.x, y=request_dto.position.y)
        update = TableUpdate(
            status=request_dto.status,
            capacity=request_dto.capacity,
            position=position,
        )
        return self._apply(table_id, update, trace_ctx)

    def set_status(
        self,
        table_id: TableId,
        new_status: TableStatus,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> TableResponse:
        return self._apply(table_id, TableUpdate(status=new_status), trace_ctx)

    def _apply(self, table_id: TableId, update: TableUpdate, trace_ctx: TraceContext) -> TableResponse:
        table = _load_table(self._table_repository, table_id)
        try:
            updated = table.apply(update, datetime.now(timezone.utc))
        except TableTransitionError as exc:
            raise InvalidTableTransitionError(str(exc)) from exc

        self._table_repository.save(updated)
        if update.status is not None:
            _announce(self._publisher, updated, table.status, trace_ctx)
        return to_table_response(updated)


class _SeatParty:
    _status_name = ""

    def __init__(self, table_repository: TableRepository, publisher: EventPublisher) -> None:
        self._table_repository = table_repository
        self._publisher = publisher

    def execute(
        self,
        table_id: TableId,
        party_name: str,
        party_size: int,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> TableResponse:
        table = self._table_repository.get(table_id)
        if table is None:
            record_seat_rejected("not_found")
            raise TableNotFoundError(f"table not found for table_id={table_id}")

        try:
            updated = self._seat(table, party_name, party_size, datetime.now(timezone.utc))
        except DomainCapacityExceededError as exc:
            record_seat_rejected("capacity")
            raise CapacityExceededError(str(exc)) from exc
        except DomainTableNotAvailableError as exc:
            record_seat_rejected("not_available")
            raise TableNotAvailableError(str(exc)) from exc

        self._table_repository.save(updated)
        logger.info(
            f"table_{self._status_name}",
            extra={"table_id": updated.table_id, "party_size": party_size},
        )
        _announce(self._publisher, updated, table.status, trace_ctx)
        return to_table_response(updated)

    def _seat(self, table: Table, party_name: str, party_size: int, now: datetime) -> Table:
        raise NotImplementedError


class AllocateTable(_SeatParty):
    _status_name = "allocated"

    def _seat(self, table: Table, party_name: str, party_size: int, now: datetime) -> Table:
        return table.allocate(party_name, party_size, now)


class ReserveTable(_SeatParty):
    _status_name = "reserved"

    def _seat(self, table: Table, party_name: str, party_size: int, now: datetime) -> Table:
        return table.reserve(party_name, party_size, now)


class ReleaseTable:
    """Frees a table. Unpaid bills do not block release."""

    def __init__(self, table_repository: TableRepository, publisher: EventPublisher) -> None:
        self._table_repository = table_repository
        self._publisher = publisher

    def execute(self, table_id: TableId, trace_ctx: TraceContext = EMPTY_TRACE) -> TableResponse:
        table = _load_table(self._table_repository, table_id)
        updated = table.release(datetime.now(timezone.utc))
        self._table_repository.save(updated)
        logger.info("table_released", extra={"table_id": updated.table_id})
        _announce(self._publisher, updated, table.status, trace_ctx)
        return to_table_response(updated)


class GetTableQrCode:
    def __init__(
        self,
        table_repository: TableRepository,
        public_base_url: str,
        image_service_url: str,
    ) -> None:
        self._table_repository = table_repository
        self._public_base_url = public_base_url.rstrip("/")
        self._image_service_url = image_service_url

    def execute(self, table_id: TableId) -> TableQrCodeResponse:
        table = _load_table(self._table_repository, table_id)
        order_url = f"{self._public_base_url}/order?{urlencode({'table': table.table_id})}"
        image_url = f"{self._image_service_url}?{urlencode({'size': '400x400', 'data': order_url})}"
        return TableQrCodeResponse(
            tableId=str(table.table_id),
            tableNumber=table.number,
            orderUrl=order_url,
            imageUrl=image_url,
        )
