from __future__ import annotations

from collections.abc import Collection
from decimal import Decimal

from sqlalchemy import Engine, select
from sqlalchemy.orm import selectinload

from dineflow.application.ports.repositories import OrderRepository
from dineflow.domain.common.ids import MenuItemId, OrderId, OrderLineId, TableId, UserId
from dineflow.domain.common.money import Money
from dineflow.domain.order.entities import Order, OrderLine, OrderStatus
from dineflow.infrastructure.db.models.order import OrderLineModel, OrderModel
from dineflow.infrastructure.db.session import as_utc, get_engine, store_session


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, order: Order) -> None:
        with store_session(self._engine) as session:
            session.add(self._to_model(order))
            session.commit()

    def get(self, order_id: OrderId) -> Order | None:
        statement = (
            select(OrderModel)
            .options(selectinload(OrderModel.lines))
            .where(OrderModel.id == str(order_id))
            .limit(1)
        )
        with store_session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            return self._to_domain(model) if model is not None else None

    def update(self, order: Order) -> None:
        with store_session(self._engine) as session:
            session.merge(self._to_model(order))
            session.commit()

    def list_orders(
        self,
        table_id: TableId | None = None,
        statuses: Collection[OrderStatus] | None = None,
    ) -> list[Order]:
        statement = select(OrderModel).options(selectinload(OrderModel.lines))
        if table_id is not None:
            statement = statement.where(OrderModel.table_id == str(table_id))
        if statuses is not None:
            statement = statement.where(OrderModel.status.in_([status.value for status in statuses]))
        statement = statement.order_by(OrderModel.created_at, OrderModel.id)
        with store_session(self._engine) as session:
            return [self._to_domain(model) for model in session.execute(statement).scalars()]

    @staticmethod
    def _to_model(order: Order) -> OrderModel:
        return OrderModel(
            id=str(order.order_id),
            table_id=str(order.table_id),
            status=order.status.value,
            tax_rate=order.tax_rate,
            subtotal_cents=order.subtotal.amount_cents,
            tax_cents=order.tax.amount_cents,
            total_cents=order.total.amount_cents,
            currency=order.total.currency,
            customer_id=str(order.customer_id) if order.customer_id else None,
            created_at=order.created_at,
            updated_at=order.updated_at,
            completed_at=order.completed_at,
            lines=[
                OrderLineModel(
                    id=str(line.line_id),
                    position=position,
                    item_id=str(line.item_id),
                    name=line.name,
                    quantity=line.quantity,
                    unit_price_cents=line.unit_price.amount_cents,
                    currency=line.unit_price.currency,
                    special_requests=line.special_requests,
                )
                for position, line in enumerate(order.lines)
            ],
        )

    @staticmethod
    def _to_domain(model: OrderModel) -> Order:
        return Order(
            order_id=OrderId(model.id),
            table_id=TableId(model.table_id),
            status=OrderStatus(model.status),
            lines=[
                OrderLine(
                    line_id=OrderLineId(line.id),
                    item_id=MenuItemId(line.item_id),
                    name=line.name,
                    quantity=line.quantity,
                    unit_price=Money(amount_cents=line.unit_price_cents, currency=line.currency),
                    special_requests=line.special_requests,
                )
                for line in model.lines
            ],
            tax_rate=Decimal(model.tax_rate),
            subtotal=Money(amount_cents=model.subtotal_cents, currency=model.currency),
            tax=Money(amount_cents=model.tax_cents, currency=model.currency),
            total=Money(amount_cents=model.total_cents, currency=model.currency),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            completed_at=as_utc(model.completed_at),
            customer_id=UserId(model.customer_id) if model.customer_id else None,
        )
