from __future__ import annotations

from sqlalchemy import Engine, select

from dineflow.application.ports.repositories import TableRepository
from dineflow.domain.common.ids import TableId
from dineflow.domain.table.entities import Occupant, Table, TablePosition, TableStatus
from dineflow.infrastructure.db.models.table import TableModel
from dineflow.infrastructure.db.session import as_utc, get_engine, store_session


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, table_id: TableId) -> Table | None:
        with store_session(self._engine) as session:
            model = session.get(TableModel, str(table_id))
            return self._to_domain(model) if model is not None else None

    def get_by_number(self, number: int) -> Table | None:
        statement = select(TableModel).where(TableModel.number == number).limit(1)
        with store_session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            return self._to_domain(model) if model is not None else None

    def list_tables(self) -> list[Table]:
        statement = select(TableModel).order_by(TableModel.number)
        with store_session(self._engine) as session:
            return [self._to_domain(model) for model in session.execute(statement).scalars()]

    def save(self, table: Table) -> None:
        with store_session(self._engine) as session:
            session.merge(self._to_model(table))
            session.commit()

    @staticmethod
    def _to_model(table: Table) -> TableModel:
        occupant = table.occupant
        return TableModel(
            id=str(table.table_id),
            number=table.number,
            capacity=table.capacity,
            status=table.status.value,
            party_name=occupant.party_name if occupant else None,
            party_size=occupant.party_size if occupant else None,
            seated_at=occupant.seated_at if occupant else None,
            position_x=table.position.x,
            position_y=table.position.y,
            updated_at=table.updated_at,
        )

    @staticmethod
    def _to_domain(model: TableModel) -> Table:
        occupant = None
        if model.party_name is not None and model.party_size is not None and model.seated_at:
            occupant = Occupant(
                party_name=model.party_name,
                party_size=model.party_size,
                seated_at=as_utc(model.seated_at),
            )
        return Table(
            table_id=TableId(model.id),
            number=model.number,
            capacity=model.capacity,
            status=TableStatus(model.status),
            occupant=occupant,
            position=TablePosition(x=model.position_x, y=model.position_y),
            updated_at=as_utc(model.updated_at),
        )
