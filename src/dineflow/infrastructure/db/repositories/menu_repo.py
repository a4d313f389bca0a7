from __future__ import annotations

from sqlalchemy import Engine, select

from dineflow.application.ports.repositories import MenuRepository
from dineflow.domain.common.ids import MenuItemId
from dineflow.domain.common.money import Money
from dineflow.domain.menu.entities import AvailabilityStatus, MenuItem
from dineflow.infrastructure.db.models.menu import MenuItemModel
from dineflow.infrastructure.db.session import as_utc, get_engine, store_session


class SqlAlchemyMenuRepository(MenuRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, item_id: MenuItemId) -> MenuItem | None:
        with store_session(self._engine) as session:
            model = session.get(MenuItemModel, str(item_id))
            return self._to_domain(model) if model is not None else None

    def list_items(self) -> list[MenuItem]:
        statement = select(MenuItemModel).order_by(MenuItemModel.category, MenuItemModel.name)
        with store_session(self._engine) as session:
            return [self._to_domain(model) for model in session.execute(statement).scalars()]

    def save(self, item: MenuItem) -> None:
        with store_session(self._engine) as session:
            session.merge(self._to_model(item))
            session.commit()

    @staticmethod
    def _to_model(item: MenuItem) -> MenuItemModel:
        return MenuItemModel(
            id=str(item.item_id),
            name=item.name,
            description=item.description,
            price_cents=item.price_money.amount_cents,
            currency=item.price_money.currency,
            category=item.category,
            availability=item.availability.value,
            prep_time_minutes=item.prep_time_minutes,
            popularity_score=item.popularity_score,
            is_archived=item.is_archived,
            updated_at=item.updated_at,
        )

    @staticmethod
    def _to_domain(model: MenuItemModel) -> MenuItem:
        return MenuItem(
            item_id=MenuItemId(model.id),
            name=model.name,
            description=model.description,
            price_money=Money(amount_cents=model.price_cents, currency=model.currency),
            category=model.category,
            availability=AvailabilityStatus(model.availability),
            prep_time_minutes=model.prep_time_minutes,
            popularity_score=model.popularity_score,
            is_archived=model.is_archived,
            updated_at=as_utc(model.updated_at),
        )
