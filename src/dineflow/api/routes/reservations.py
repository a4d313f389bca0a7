from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, status

from dineflow.api.auth import require_any_role, require_staff
from dineflow.api.dependencies import current_trace_context, get_publisher, get_stores
from dineflow.application.dto.requests import (
    CreateReservationRequest,
    SeatReservationRequest,
    UpdateReservationRequest,
)
from dineflow.application.dto.responses import (
    ReservationListResponse,
    ReservationResponse,
    SeatReservationResponse,
)
from dineflow.application.use_cases.floor import AllocateTable
from dineflow.application.use_cases.reservations import (
    CreateReservation,
    GetReservation,
    ListReservations,
    SeatReservation,
    UpdateReservation,
)
from dineflow.domain.common.ids import ReservationId, TableId, UserId
from dineflow.domain.reservation.entities import ReservationStatus
from dineflow.infrastructure.auth.tokens import Principal

router = APIRouter()


@router.post(
    "/v1/reservations",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reservation(
    request_dto: CreateReservationRequest,
    principal: Principal = Depends(require_any_role),
) -> ReservationResponse:
    stores = get_stores()
    use_case = CreateReservation(
        reservation_repository=stores.reservations,
        table_repository=stores.tables,
        publisher=get_publisher(),
    )
    return use_case.execute(
        request_dto,
        customer_id=UserId(principal.user_id),
        trace_ctx=current_trace_context(),
    )


@router.get(
    "/v1/reservations",
    response_model=ReservationListResponse,
    dependencies=[Depends(require_staff)],
)
def list_reservations(
    status: ReservationStatus | None = None,
    on: date | None = None,
) -> ReservationListResponse:
    stores = get_stores()
    return ListReservations(
        reservation_repository=stores.reservations,
        settings_repository=stores.settings,
    ).execute(status=status, on=on)


@router.get(
    "/v1/reservations/{reservation_id}",
    response_model=ReservationResponse,
    dependencies=[Depends(require_staff)],
)
def get_reservation(reservation_id: str) -> ReservationResponse:
    use_case = GetReservation(reservation_repository=get_stores().reservations)
    return use_case.execute(ReservationId(reservation_id))


@router.put(
    "/v1/reservations/{reservation_id}",
    response_model=ReservationResponse,
    dependencies=[Depends(require_staff)],
)
def update_reservation(
    reservation_id: str,
    request_dto: UpdateReservationRequest,
) -> ReservationResponse:
    stores = get_stores()
    use_case = UpdateReservation(
        reservation_repository=stores.reservations,
        table_repository=stores.tables,
        publisher=get_publisher(),
    )
    return use_case.execute(
        ReservationId(reservation_id),
        request_dto,
        trace_ctx=current_trace_context(),
    )


@router.post(
    "/v1/reservations/{reservation_id}/seat",
    response_model=SeatReservationResponse,
    dependencies=[Depends(require_staff)],
)
def seat_reservation(
    reservation_id: str,
    request_dto: SeatReservationRequest,
) -> SeatReservationResponse:
    stores = get_stores()
    publisher = get_publisher()
    use_case = SeatReservation(
        reservation_repository=stores.reservations,
        allocate_table=AllocateTable(table_repository=stores.tables, publisher=publisher),
        publisher=publisher,
    )
    return use_case.execute(
        ReservationId(reservation_id),
        TableId(request_dto.table_id) if request_dto.table_id else None,
        trace_ctx=current_trace_context(),
    )
