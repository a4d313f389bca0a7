from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from dineflow.domain.common.ids import BillId, OrderId, TableId
from dineflow.domain.common.money import Money, split_evenly, zero
from dineflow.domain.order.entities import Order, OrderStatus

MAX_SPLIT_WAYS = 20


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    DIGITAL = "digital"

    @property
    def requires_processor(self) -> bool:
        return self is not PaymentMethod.CASH


@dataclass(frozen=True)
class Bill:
    """Snapshot of what a table owes for a set of completed orders.

    ``total_amount`` is fixed when the bill is generated and is never recomputed,
    even if the referenced orders change afterwards.
    """

    bill_id: BillId
    table_id: TableId
    order_ids: tuple[OrderId, ...]
    total_amount: Money
    is_paid: bool
    created_at: datetime
    payment_method: PaymentMethod | None = None
    paid_at: datetime | None = None
    processor_reference: str | None = None

    def __post_init__(self) -> None:
        if not self.order_ids:
            raise ValueError("bill must reference at least one order")
        if self.is_paid and (self.payment_method is None or self.paid_at is None):
            raise ValueError("a paid bill needs payment_method and paid_at")
        if not self.is_paid and (self.payment_method is not None or self.paid_at is not None):
            raise ValueError("payment details are only set on payment")

    def pay(
        self,
        method: PaymentMethod,
        now: datetime,
        processor_reference: str | None = None,
    ) -> Bill:
        if self.is_paid:
            raise BillAlreadyPaidError(f"bill {self.bill_id} is already paid")
        return replace(
            self,
            is_paid=True,
            payment_method=method,
            paid_at=now,
            processor_reference=processor_reference,
        )

    def split(self, ways: int) -> list[Money]:
        if ways < 1 or ways > MAX_SPLIT_WAYS:
            raise InvalidSplitError(f"a bill can be split between 1 and {MAX_SPLIT_WAYS} ways")
        return split_evenly(self.total_amount, ways)


def generate_bill(bill_id: BillId, table_id: TableId, orders: list[Order], now: datetime) -> Bill:
    if not orders:
        raise NoCompletedOrdersError(f"table {table_id} has no completed orders to bill")
    if any(order.status != OrderStatus.COMPLETED for order in orders):
        raise ValueError("only completed orders can be billed")
    if any(order.table_id != table_id for order in orders):
        raise ValueError("all billed orders must belong to the table")

    total = zero(orders[0].total.currency)
    for order in orders:
        total = total.plus(order.total)
    return Bill(
        bill_id=bill_id,
        table_id=table_id,
        order_ids=tuple(order.order_id for order in orders),
        total_amount=total,
        is_paid=False,
        created_at=now,
    )


class BillAlreadyPaidError(Exception):
    pass


class NoCompletedOrdersError(Exception):
    pass


class InvalidSplitError(Exception):
    pass
