from __future__ import annotations

from sqlalchemy import Engine, select

from dineflow.application.ports.repositories import WaitlistRepository
from dineflow.domain.common.ids import WaitlistEntryId
from dineflow.domain.waitlist.entities import WaitlistEntry, WaitlistStatus
from dineflow.infrastructure.db.models.waitlist import WaitlistEntryModel
from dineflow.infrastructure.db.session import as_utc, get_engine, store_session


class SqlAlchemyWaitlistRepository(WaitlistRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, entry: WaitlistEntry) -> None:
        with store_session(self._engine) as session:
            session.add(self._to_model(entry))
            session.commit()

    def get(self, entry_id: WaitlistEntryId) -> WaitlistEntry | None:
        with store_session(self._engine) as session:
            model = session.get(WaitlistEntryModel, str(entry_id))
            return self._to_domain(model) if model is not None else None

    def update(self, entry: WaitlistEntry) -> None:
        with store_session(self._engine) as session:
            session.merge(self._to_model(entry))
            session.commit()

    def list_entries(self, status: WaitlistStatus | None = None) -> list[WaitlistEntry]:
        statement = select(WaitlistEntryModel)
        if status is not None:
            statement = statement.where(WaitlistEntryModel.status == status.value)
        statement = statement.order_by(WaitlistEntryModel.created_at, WaitlistEntryModel.id)
        with store_session(self._engine) as session:
            return [self._to_domain(model) for model in session.execute(statement).scalars()]

    @staticmethod
    def _to_model(entry: WaitlistEntry) -> WaitlistEntryModel:
        return WaitlistEntryModel(
            id=str(entry.entry_id),
            party_name=entry.party_name,
            party_size=entry.party_size,
            phone=entry.phone,
            status=entry.status.value,
            notified=entry.notified,
            estimated_wait_minutes=entry.estimated_wait_minutes,
            created_at=entry.created_at,
        )

    @staticmethod
    def _to_domain(model: WaitlistEntryModel) -> WaitlistEntry:
        return WaitlistEntry(
            entry_id=WaitlistEntryId(model.id),
            party_name=model.party_name,
            party_size=model.party_size,
            created_at=as_utc(model.created_at),
            estimated_wait_minutes=model.estimated_wait_minutes,
            status=WaitlistStatus(model.status),
            phone=model.phone,
            notified=model.notified,
        )
