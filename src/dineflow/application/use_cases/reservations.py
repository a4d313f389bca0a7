from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from uuid import uuid4

from dineflow.application.dto.requests import CreateReservationRequest, UpdateReservationRequest
from dineflow.application.dto.responses import (
    ReservationListResponse,
    ReservationResponse,
    SeatReservationResponse,
)
from dineflow.application.mappers.event_envelope import serialize_reservation_event
from dineflow.application.mappers.reservation_mapper import to_reservation_response
from dineflow.application.metrics.lifecycle import record_reservation_status
from dineflow.application.ports.publisher import EventPublisher
from dineflow.application.ports.repositories import (
    ReservationRepository,
    SettingsRepository,
    TableRepository,
)
from dineflow.application.use_cases.context import EMPTY_TRACE, TraceContext
from dineflow.application.use_cases.floor import (
    AllocateTable,
    CapacityExceededError,
    TableNotFoundError,
)
from dineflow.application.use_cases.publishing import publish_event
from dineflow.application.use_cases.settings import current_settings
from dineflow.application.use_cases.waitlist import InvalidPartySizeError
from dineflow.domain.common.ids import ReservationId, TableId, UserId
from dineflow.domain.reservation.entities import (
    Reservation,
    ReservationStatus,
    ReservationTransitionError,
    ReservationUpdate,
)
from dineflow.domain.waitlist.entities import InvalidPartySizeError as DomainInvalidPartySizeError
from dineflow.domain.waitlist.entities import validate_party_size

logger = logging.getLogger(__name__)


class ReservationNotFoundError(Exception):
    pass


class InvalidReservationError(Exception):
    pass


class InvalidReservationTransitionError(Exception):
    pass


def _load_reservation(
    reservation_repository: ReservationRepository,
    reservation_id: ReservationId,
) -> Reservation:
    reservation = reservation_repository.get(reservation_id)
    if reservation is None:
        raise ReservationNotFoundError(f"reservation not found for reservation_id={reservation_id}")
    return reservation


def _check_party_size(party_size: int) -> None:
    try:
        validate_party_size(party_size)
    except DomainInvalidPartySizeError as exc:
        raise InvalidPartySizeError(str(exc)) from exc


def _future_time(reserved_for: datetime, now: datetime) -> datetime:
    # stored in UTC; display zones are applied when listing
    reserved_for = reserved_for.astimezone(timezone.utc)
    if reserved_for <= now:
        raise InvalidReservationError("reservations must be made for a future time")
    return reserved_for


def _check_table_fits(table_repository: TableRepository, table_id: TableId, party_size: int) -> None:
    table = table_repository.get(table_id)
    if table is None:
        raise TableNotFoundError(f"table not found for table_id={table_id}")
    if party_size > table.capacity:
        raise CapacityExceededError(
            f"party of {party_size} exceeds capacity {table.capacity} of table {table.number}"
        )


def _announce(
    publisher: EventPublisher,
    event_type: str,
    reservation: Reservation,
    trace_ctx: TraceContext,
) -> None:
    record_reservation_status(reservation)
    message = serialize_reservation_event(
        event_type=event_type,
        occurred_at=reservation.updated_at,
        reservation=reservation,
        trace_id=trace_ctx.trace_id,
        request_id=trace_ctx.request_id,
    )
    publish_event(publisher, event_type, message)


class CreateReservation:
    def __init__(
        self,
        reservation_repository: ReservationRepository,
        table_repository: TableRepository,
        publisher: EventPublisher,
    ) -> None:
        self._reservation_repository = reservation_repository
        self._table_repository = table_repository
        self._publisher = publisher

    def execute(
        self,
        request_dto: CreateReservationRequest,
        customer_id: UserId | None = None,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> ReservationResponse:
        now = datetime.now(timezone.utc)
        _check_party_size(request_dto.party_size)
        reserved_for = _future_time(request_dto.reserved_for, now)
        table_id = TableId(request_dto.table_id) if request_dto.table_id else None
        if table_id is not None:
            _check_table_fits(self._table_repository, table_id, request_dto.party_size)

        reservation = Reservation(
            reservation_id=ReservationId(f"rsv_{uuid4().hex[:12]}"),
            customer_name=request_dto.customer_name,
            party_size=request_dto.party_size,
            reserved_for=reserved_for,
            created_at=now,
            updated_at=now,
            phone=request_dto.phone,
            table_id=table_id,
            notes=request_dto.notes,
            customer_id=customer_id,
        )
        self._reservation_repository.add(reservation)
        logger.info(
            "reservation_created",
            extra={
                "reservation_id": reservation.reservation_id,
                "party_size": reservation.party_size,
                "reserved_for": reservation.reserved_for.isoformat(),
            },
        )
        _announce(self._publisher, "reservation.created", reservation, trace_ctx)
        return to_reservation_response(reservation)


class ListReservations:
    """Upcoming bookings in time order, optionally for one local calendar day."""

    def __init__(
        self,
        reservation_repository: ReservationRepository,
        settings_repository: SettingsRepository,
    ) -> None:
        self._reservation_repository = reservation_repository
        self._settings_repository = settings_repository

    def execute(
        self,
        status: ReservationStatus | None = None,
        on: date | None = None,
    ) -> ReservationListResponse:
        reservations = self._reservation_repository.list_reservations(status=status)
        if on is not None:
            zone = current_settings(self._settings_repository).zone
            reservations = [
                reservation
                for reservation in reservations
                if reservation.reserved_for.astimezone(zone).date() == on
            ]
        reservations.sort(key=lambda reservation: (reservation.reserved_for, reservation.reservation_id))
        return ReservationListResponse(
            reservations=[to_reservation_response(reservation) for reservation in reservations]
        )


class GetReservation:
    def __init__(self, reservation_repository: ReservationRepository) -> None:
        self._reservation_repository = reservation_repository

    def execute(self, reservation_id: ReservationId) -> ReservationResponse:
        return to_reservation_response(
            _load_reservation(self._reservation_repository, reservation_id)
        )


class UpdateReservation:
    """Confirms, cancels or reschedules a booking. Seating goes through SeatReservation."""

    def __init__(
        self,
        reservation_repository: ReservationRepository,
        table_repository: TableRepository,
        publisher: EventPublisher,
    ) -> None:
        self._reservation_repository = reservation_repository
        self._table_repository = table_repository
        self._publisher = publisher

    def execute(
        self,
        reservation_id: ReservationId,
        request_dto: UpdateReservationRequest,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> ReservationResponse:
        reservation = _load_reservation(self._reservation_repository, reservation_id)
        if request_dto.status == ReservationStatus.SEATED:
            raise InvalidReservationTransitionError(
                f"reservation {reservation_id} must be seated at a table, not marked seated"
            )

        now = datetime.now(timezone.utc)
        reserved_for = None
        if request_dto.reserved_for is not None:
            reserved_for = _future_time(request_dto.reserved_for, now)
        if request_dto.party_size is not None:
            _check_party_size(request_dto.party_size)
        table_id = TableId(request_dto.table_id) if request_dto.table_id else None
        if table_id is not None or request_dto.party_size is not None:
            target_table = table_id or reservation.table_id
            if target_table is not None:
                _check_table_fits(
                    self._table_repository,
                    target_table,
                    request_dto.party_size or reservation.party_size,
                )

        try:
            updated = reservation.amend(
                ReservationUpdate(
                    reserved_for=reserved_for,
                    party_size=request_dto.party_size,
                    table_id=table_id,
                    notes=request_dto.notes,
                    phone=request_dto.phone,
                    status=request_dto.status,
                ),
                now,
            )
        except ReservationTransitionError as exc:
            raise InvalidReservationTransitionError(str(exc)) from exc

        if updated == reservation:
            return to_reservation_response(reservation)
        self._reservation_repository.update(updated)
        logger.info(
            "reservation_updated",
            extra={"reservation_id": updated.reservation_id, "status": updated.status.value},
        )
        _announce(self._publisher, "reservation.updated", updated, trace_ctx)
        return to_reservation_response(updated)


class SeatReservation:
    def __init__(
        self,
        reservation_repository: ReservationRepository,
        allocate_table: AllocateTable,
        publisher: EventPublisher,
    ) -> None:
        self._reservation_repository = reservation_repository
        self._allocate_table = allocate_table
        self._publisher = publisher

    def execute(
        self,
        reservation_id: ReservationId,
        table_id: TableId | None = None,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> SeatReservationResponse:
        reservation = _load_reservation(self._reservation_repository, reservation_id)
        if not reservation.is_open:
            raise InvalidReservationTransitionError(
                f"reservation {reservation_id} is already {reservation.status.value}"
            )
        target = table_id or reservation.table_id
        if target is None:
            raise InvalidReservationError(f"reservation {reservation_id} has no table to seat at")

        table = self._allocate_table.execute(
            target,
            reservation.customer_name,
            reservation.party_size,
            trace_ctx=trace_ctx,
        )
        seated = reservation.amend(
            ReservationUpdate(table_id=target, status=ReservationStatus.SEATED),
            datetime.now(timezone.utc),
        )
        self._reservation_repository.update(seated)
        logger.info(
            "reservation_seated",
            extra={"reservation_id": seated.reservation_id, "table_id": target},
        )
        _announce(self._publisher, "reservation.seated", seated, trace_ctx)
        return SeatReservationResponse(reservation=to_reservation_response(seated), table=table)
