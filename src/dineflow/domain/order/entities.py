from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum

from dineflow.domain.common.ids import MenuItemId, OrderId, OrderLineId, TableId, UserId
from dineflow.domain.common.money import Money, apply_rate, zero


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    PAID = "paid"


ORDER_STATUS_SEQUENCE: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.COMPLETED,
    OrderStatus.PAID,
)

OPEN_ORDER_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PREPARING})
KITCHEN_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY})


@dataclass(frozen=True)
class OrderLine:
    line_id: OrderLineId
    item_id: MenuItemId
    name: str
    quantity: int
    unit_price: Money
    special_requests: str | None = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity)

    @property
    def merge_key(self) -> tuple[str, str | None]:
        return str(self.item_id), self.special_requests


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    table_id: TableId
    status: OrderStatus
    lines: list[OrderLine]
    tax_rate: Decimal
    subtotal: Money
    tax: Money
    total: Money
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
    customer_id: UserId | None = None

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("order must contain at least one line")
        currency = self.lines[0].unit_price.currency
        if any(line.unit_price.currency != currency for line in self.lines):
            raise ValueError("all order lines must share one currency")
        subtotal, tax, total = _totals(self.lines, self.tax_rate)
        if self.subtotal != subtotal:
            raise ValueError("subtotal must equal the sum of unit_price * quantity")
        if self.tax != tax:
            raise ValueError("tax must equal subtotal * tax_rate")
        if self.total != total:
            raise ValueError("total must equal subtotal + tax")

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_ORDER_STATUSES

    def add_lines(self, new_lines: list[OrderLine], now: datetime) -> Order:
        if not self.is_open:
            raise OrderClosedError(
                f"order {self.order_id} is {self.status.value}; lines can no longer be added"
            )
        lines = merge_lines(self.lines, new_lines)
        subtotal, tax, total = _totals(lines, self.tax_rate)
        return replace(
            self,
            lines=lines,
            subtotal=subtotal,
            tax=tax,
            total=total,
            updated_at=now,
        )

    def advance(self, next_status: OrderStatus, now: datetime) -> Order:
        current_index = ORDER_STATUS_SEQUENCE.index(self.status)
        target_index = ORDER_STATUS_SEQUENCE.index(next_status)
        if target_index != current_index + 1:
            raise OrderTransitionError(
                f"cannot move order from status={self.status.value} to status={next_status.value}"
            )
        completed_at = self.completed_at
        if next_status == OrderStatus.COMPLETED and completed_at is None:
            completed_at = now
        return replace(self, status=next_status, completed_at=completed_at, updated_at=now)


def merge_lines(existing: list[OrderLine], incoming: list[OrderLine]) -> list[OrderLine]:
    """Merge lines that share (item, special requests) by summing quantities.

    The earliest line keeps its id and price snapshot.
    """
    merged: list[OrderLine] = []
    index_by_key: dict[tuple[str, str | None], int] = {}
    for line in [*existing, *incoming]:
        position = index_by_key.get(line.merge_key)
        if position is None:
            index_by_key[line.merge_key] = len(merged)
            merged.append(line)
            continue
        current = merged[position]
        merged[position] = replace(current, quantity=current.quantity + line.quantity)
    return merged


def create_pending_order(
    order_id: OrderId,
    table_id: TableId,
    lines: list[OrderLine],
    tax_rate: Decimal,
    now: datetime,
    customer_id: UserId | None = None,
) -> Order:
    if not lines:
        raise EmptyOrderError("order must contain at least one line")

    merged = merge_lines([], lines)
    subtotal, tax, total = _totals(merged, tax_rate)
    return Order(
        order_id=order_id,
        table_id=table_id,
        status=OrderStatus.PENDING,
        lines=merged,
        tax_rate=tax_rate,
        subtotal=subtotal,
        tax=tax,
        total=total,
        created_at=now,
        updated_at=now,
        customer_id=customer_id,
    )


def _totals(lines: list[OrderLine], tax_rate: Decimal) -> tuple[Money, Money, Money]:
    subtotal = zero(lines[0].unit_price.currency)
    for line in lines:
        subtotal = subtotal.plus(line.line_total)
    tax = apply_rate(subtotal, tax_rate)
    return subtotal, tax, subtotal.plus(tax)


class OrderTransitionError(Exception):
    pass


class OrderClosedError(Exception):
    pass


class EmptyOrderError(Exception):
    pass
