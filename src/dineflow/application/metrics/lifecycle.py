from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import Counter, Gauge, Histogram

from dineflow.domain.order.entities import Order, OrderStatus
from dineflow.domain.reservation.entities import Reservation
from dineflow.domain.table.entities import TableStatus

ORDERS_TOTAL = Counter(
    "dineflow_orders_total",
    "Total number of orders observed by status.",
    ["status"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "dineflow_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to"],
)

ORDER_TIME_TO_READY_SECONDS = Histogram(
    "dineflow_order_time_to_ready_seconds",
    "Time between order creation and readiness.",
)

TABLE_STATUS_CHANGES_TOTAL = Counter(
    "dineflow_table_status_changes_total",
    "Total number of table status changes.",
    ["from", "to"],
)

TABLE_SEAT_REJECTED_TOTAL = Counter(
    "dineflow_table_seat_rejected_total",
    "Total number of rejected allocate/reserve attempts.",
    ["reason"],
)

WAITLIST_SIZE = Gauge(
    "dineflow_waitlist_size",
    "Number of parties currently waiting.",
)

RESERVATIONS_TOTAL = Counter(
    "dineflow_reservations_total",
    "Total number of reservation changes by resulting status.",
    ["status"],
)

BILLS_GENERATED_TOTAL = Counter(
    "dineflow_bills_generated_total",
    "Total number of bills generated.",
)

BILLS_PAID_TOTAL = Counter(
    "dineflow_bills_paid_total",
    "Total number of bills paid by payment method.",
    ["method"],
)

PAYMENTS_DECLINED_TOTAL = Counter(
    "dineflow_payments_declined_total",
    "Total number of payments declined by the processor.",
    ["method"],
)

BILL_SETTLEMENT_FAILURES_TOTAL = Counter(
    "dineflow_bill_settlement_failures_total",
    "Total number of orders that could not be marked paid after payment.",
)


def record_order_status(order: Order) -> None:
    ORDERS_TOTAL.labels(status=order.status.value).inc()


def record_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_time_to_ready(order: Order, now: datetime | None = None) -> None:
    current = now or datetime.now(timezone.utc)
    ORDER_TIME_TO_READY_SECONDS.observe(max((current - order.created_at).total_seconds(), 0.0))


def record_table_status_change(from_status: TableStatus, to_status: TableStatus) -> None:
    TABLE_STATUS_CHANGES_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_seat_rejected(reason: str) -> None:
    TABLE_SEAT_REJECTED_TOTAL.labels(reason=reason).inc()


def record_waitlist_size(size: int) -> None:
    WAITLIST_SIZE.set(size)


def record_bill_generated() -> None:
    BILLS_GENERATED_TOTAL.inc()


def record_bill_paid(method: str) -> None:
    BILLS_PAID_TOTAL.labels(method=method).inc()


def record_payment_declined(method: str) -> None:
    PAYMENTS_DECLINED_TOTAL.labels(method=method).inc()


def record_settlement_failure() -> None:
    BILL_SETTLEMENT_FAILURES_TOTAL.inc()


def record_reservation_status(reservation: Reservation) -> None:
    RESERVATIONS_TOTAL.labels(status=reservation.status.value).inc()
