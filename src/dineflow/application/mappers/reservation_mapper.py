from __future__ import annotations

from dineflow.application.dto.responses import ReservationResponse
from dineflow.domain.reservation.entities import Reservation


def to_reservation_response(reservation: Reservation) -> ReservationResponse:
    return ReservationResponse(
        reservationId=str(reservation.reservation_id),
        customerName=reservation.customer_name,
        partySize=reservation.party_size,
        reservedFor=reservation.reserved_for,
        status=reservation.status.value,
        phone=reservation.phone,
        tableId=str(reservation.table_id) if reservation.table_id else None,
        notes=reservation.notes,
        customerId=str(reservation.customer_id) if reservation.customer_id else None,
        createdAt=reservation.created_at,
        updatedAt=reservation.updated_at,
    )
