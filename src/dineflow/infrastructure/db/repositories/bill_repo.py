from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.orm import selectinload

from dineflow.application.ports.repositories import BillRepository
from dineflow.domain.billing.entities import Bill, PaymentMethod
from dineflow.domain.common.ids import BillId, OrderId, TableId
from dineflow.domain.common.money import Money
from dineflow.infrastructure.db.models.billing import BillModel, BillOrderModel
from dineflow.infrastructure.db.session import as_utc, get_engine, store_session


class SqlAlchemyBillRepository(BillRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, bill: Bill) -> None:
        with store_session(self._engine) as session:
            session.add(self._to_model(bill))
            session.commit()

    def get(self, bill_id: BillId) -> Bill | None:
        statement = (
            select(BillModel)
            .options(selectinload(BillModel.orders))
            .where(BillModel.id == str(bill_id))
            .limit(1)
        )
        with store_session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            return self._to_domain(model) if model is not None else None

    def update(self, bill: Bill) -> None:
        with store_session(self._engine) as session:
            session.merge(self._to_model(bill))
            session.commit()

    def list_for_table(self, table_id: TableId) -> list[Bill]:
        statement = (
            select(BillModel)
            .options(selectinload(BillModel.orders))
            .where(BillModel.table_id == str(table_id))
            .order_by(BillModel.created_at)
        )
        with store_session(self._engine) as session:
            return [self._to_domain(model) for model in session.execute(statement).scalars()]

    @staticmethod
    def _to_model(bill: Bill) -> BillModel:
        return BillModel(
            id=str(bill.bill_id),
            table_id=str(bill.table_id),
            total_cents=bill.total_amount.amount_cents,
            currency=bill.total_amount.currency,
            is_paid=bill.is_paid,
            payment_method=bill.payment_method.value if bill.payment_method else None,
            processor_reference=bill.processor_reference,
            created_at=bill.created_at,
            paid_at=bill.paid_at,
            orders=[
                BillOrderModel(bill_id=str(bill.bill_id), order_id=str(order_id), position=position)
                for position, order_id in enumerate(bill.order_ids)
            ],
        )

    @staticmethod
    def _to_domain(model: BillModel) -> Bill:
        return Bill(
            bill_id=BillId(model.id),
            table_id=TableId(model.table_id),
            order_ids=tuple(OrderId(link.order_id) for link in model.orders),
            total_amount=Money(amount_cents=model.total_cents, currency=model.currency),
            is_paid=model.is_paid,
            created_at=as_utc(model.created_at),
            payment_method=PaymentMethod(model.payment_method) if model.payment_method else None,
            paid_at=as_utc(model.paid_at),
            processor_reference=model.processor_reference,
        )
