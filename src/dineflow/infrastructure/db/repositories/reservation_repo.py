from __future__ import annotations

from sqlalchemy import Engine, select

from dineflow.application.ports.repositories import ReservationRepository
from dineflow.domain.common.ids import ReservationId, TableId, UserId
from dineflow.domain.reservation.entities import Reservation, ReservationStatus
from dineflow.infrastructure.db.models.reservation import ReservationModel
from dineflow.infrastructure.db.session import as_utc, get_engine, store_session


class SqlAlchemyReservationRepository(ReservationRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, reservation: Reservation) -> None:
        with store_session(self._engine) as session:
            session.add(self._to_model(reservation))
            session.commit()

    def get(self, reservation_id: ReservationId) -> Reservation | None:
        with store_session(self._engine) as session:
            model = session.get(ReservationModel, str(reservation_id))
            return self._to_domain(model) if model is not None else None

    def update(self, reservation: Reservation) -> None:
        with store_session(self._engine) as session:
            session.merge(self._to_model(reservation))
            session.commit()

    def list_reservations(self, status: ReservationStatus | None = None) -> list[Reservation]:
        statement = select(ReservationModel)
        if status is not None:
            statement = statement.where(ReservationModel.status == status.value)
        statement = statement.order_by(ReservationModel.reserved_for, ReservationModel.id)
        with store_session(self._engine) as session:
            return [self._to_domain(model) for model in session.execute(statement).scalars()]

    @staticmethod
    def _to_model(reservation: Reservation) -> ReservationModel:
        return ReservationModel(
            id=str(reservation.reservation_id),
            customer_name=reservation.customer_name,
            party_size=reservation.party_size,
            reserved_for=reservation.reserved_for,
            status=reservation.status.value,
            phone=reservation.phone,
            table_id=str(reservation.table_id) if reservation.table_id else None,
            notes=reservation.notes,
            customer_id=str(reservation.customer_id) if reservation.customer_id else None,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )

    @staticmethod
    def _to_domain(model: ReservationModel) -> Reservation:
        return Reservation(
            reservation_id=ReservationId(model.id),
            customer_name=model.customer_name,
            party_size=model.party_size,
            reserved_for=as_utc(model.reserved_for),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            status=ReservationStatus(model.status),
            phone=model.phone,
            table_id=TableId(model.table_id) if model.table_id else None,
            notes=model.notes,
            customer_id=UserId(model.customer_id) if model.customer_id else None,
        )
