from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from dineflow.application.dto.responses import (
    BillResponse,
    BillSplitResponse,
    SettleBillResponse,
)
from dineflow.application.mappers.bill_mapper import to_bill_response
from dineflow.application.mappers.event_envelope import serialize_bill_event
from dineflow.application.mappers.money_mapper import to_money_response
from dineflow.application.metrics.lifecycle import (
    record_bill_generated,
    record_bill_paid,
    record_order_status,
    record_payment_declined,
    record_settlement_failure,
    record_transition,
)
from dineflow.application.ports.payments import (
    PaymentGateway,
    PaymentProcessorUnavailableError,
)
from dineflow.application.ports.publisher import EventPublisher
from dineflow.application.ports.repositories import (
    BillRepository,
    OrderRepository,
    TableRepository,
)
from dineflow.application.use_cases.context import EMPTY_TRACE, TraceContext
from dineflow.application.use_cases.floor import TableNotFoundError
from dineflow.application.use_cases.publishing import publish_event
from dineflow.domain.billing.entities import BillAlreadyPaidError as DomainBillAlreadyPaidError
from dineflow.domain.billing.entities import (
    Bill,
    InvalidSplitError,
    PaymentMethod,
    generate_bill,
)
from dineflow.domain.billing.entities import (
    NoCompletedOrdersError as DomainNoCompletedOrdersError,
)
from dineflow.domain.common.ids import BillId, OrderId, TableId
from dineflow.domain.order.entities import OrderStatus

logger = logging.getLogger(__name__)


class BillNotFoundError(Exception):
    pass


class NoCompletedOrdersError(Exception):
    pass


class BillAlreadyPaidError(Exception):
    pass


class BillNotPaidError(Exception):
    pass


class PaymentDeclinedError(Exception):
    pass


class InvalidBillSplitError(Exception):
    pass


def _load_bill(bill_repository: BillRepository, bill_id: BillId) -> Bill:
    bill = bill_repository.get(bill_id)
    if bill is None:
        raise BillNotFoundError(f"bill not found for bill_id={bill_id}")
    return bill


def _settle_orders(
    order_repository: OrderRepository,
    bill: Bill,
    now: datetime,
) -> tuple[list[OrderId], list[OrderId]]:
    """Mark each billed order paid, one write per order.

    A failure on one order is logged and counted; the others are still attempted.
    """
    settled: list[OrderId] = []
    failed: list[OrderId] = []
    for order_id in bill.order_ids:
        try:
            order = order_repository.get(order_id)
            if order is None:
                raise LookupError(f"order not found for order_id={order_id}")
            if order.status != OrderStatus.PAID:
                paid = order.advance(OrderStatus.PAID, now)
                order_repository.update(paid)
                record_transition(order.status, paid.status)
                record_order_status(paid)
            settled.append(order_id)
        except Exception:
            logger.exception(
                "bill_order_settle_failed",
                extra={"bill_id": bill.bill_id, "order_id": order_id},
            )
            record_settlement_failure()
            failed.append(order_id)
    return settled, failed


def _settlement_response(
    bill: Bill,
    settled: list[OrderId],
    failed: list[OrderId],
) -> SettleBillResponse:
    return SettleBillResponse(
        bill=to_bill_response(bill),
        settledOrderIds=[str(order_id) for order_id in settled],
        failedOrderIds=[str(order_id) for order_id in failed],
    )


class GenerateBill:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        bill_repository: BillRepository,
        publisher: EventPublisher,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository
        self._bill_repository = bill_repository
        self._publisher = publisher

    def execute(self, table_id: TableId, trace_ctx: TraceContext = EMPTY_TRACE) -> BillResponse:
        if self._table_repository.get(table_id) is None:
            raise TableNotFoundError(f"table not found for table_id={table_id}")

        already_billed = {
            order_id
            for bill in self._bill_repository.list_for_table(table_id)
            for order_id in bill.order_ids
        }
        orders = [
            order
            for order in self._order_repository.list_orders(
                table_id=table_id,
                statuses=[OrderStatus.COMPLETED],
            )
            if order.order_id not in already_billed
        ]
        orders.sort(key=lambda order: order.created_at)

        now = datetime.now(timezone.utc)
        try:
            bill = generate_bill(BillId(f"bil_{uuid4().hex[:12]}"), table_id, orders, now)
        except DomainNoCompletedOrdersError as exc:
            raise NoCompletedOrdersError(str(exc)) from exc

        self._bill_repository.add(bill)
        record_bill_generated()
        logger.info(
            "bill_generated",
            extra={"bill_id": bill.bill_id, "table_id": table_id, "order_count": len(orders)},
        )
        message = serialize_bill_event(
            event_type="bill.generated",
            occurred_at=now,
            bill=bill,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        publish_event(self._publisher, "bill.generated", message)
        return to_bill_response(bill)


class PayBill:
    """Takes payment for a bill and then settles its orders.

    The table is left as it is; staff release it separately.
    """

    def __init__(
        self,
        bill_repository: BillRepository,
        order_repository: OrderRepository,
        payment_gateway: PaymentGateway | None,
        publisher: EventPublisher,
    ) -> None:
        self._bill_repository = bill_repository
        self._order_repository = order_repository
        self._payment_gateway = payment_gateway
        self._publisher = publisher

    def execute(
        self,
        bill_id: BillId,
        method: PaymentMethod,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> SettleBillResponse:
        bill = _load_bill(self._bill_repository, bill_id)
        if bill.is_paid:
            raise BillAlreadyPaidError(f"bill {bill.bill_id} is already paid")

        processor_reference = None
        if method.requires_processor:
            if self._payment_gateway is None:
                raise PaymentProcessorUnavailableError("no payment processor is configured")
            result = self._payment_gateway.charge(bill.total_amount, reference=str(bill.bill_id))
            if not result.succeeded:
                record_payment_declined(method.value)
                logger.info(
                    "payment_declined",
                    extra={"bill_id": bill.bill_id, "reason": result.failure_reason},
                )
                raise PaymentDeclinedError(result.failure_reason or "payment was declined")
            processor_reference = result.processor_reference

        now = datetime.now(timezone.utc)
        try:
            paid = bill.pay(method, now, processor_reference=processor_reference)
        except DomainBillAlreadyPaidError as exc:
            raise BillAlreadyPaidError(str(exc)) from exc

        self._bill_repository.update(paid)
        record_bill_paid(method.value)
        logger.info("bill_paid", extra={"bill_id": paid.bill_id, "method": method.value})

        settled, failed = _settle_orders(self._order_repository, paid, now)
        message = serialize_bill_event(
            event_type="bill.paid",
            occurred_at=now,
            bill=paid,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        publish_event(self._publisher, "bill.paid", message)
        return _settlement_response(paid, settled, failed)


class SettleBill:
    """Retries marking a paid bill's orders as paid."""

    def __init__(self, bill_repository: BillRepository, order_repository: OrderRepository) -> None:
        self._bill_repository = bill_repository
        self._order_repository = order_repository

    def execute(self, bill_id: BillId) -> SettleBillResponse:
        bill = _load_bill(self._bill_repository, bill_id)
        if not bill.is_paid:
            raise BillNotPaidError(f"bill {bill.bill_id} has not been paid")
        settled, failed = _settle_orders(self._order_repository, bill, datetime.now(timezone.utc))
        return _settlement_response(bill, settled, failed)


class GetBill:
    def __init__(self, bill_repository: BillRepository) -> None:
        self._bill_repository = bill_repository

    def execute(self, bill_id: BillId) -> BillResponse:
        return to_bill_response(_load_bill(self._bill_repository, bill_id))


class GetOpenBillForTable:
    def __init__(self, bill_repository: BillRepository, table_repository: TableRepository) -> None:
        self._bill_repository = bill_repository
        self._table_repository = table_repository

    def execute(self, table_id: TableId) -> BillResponse:
        if self._table_repository.get(table_id) is None:
            raise TableNotFoundError(f"table not found for table_id={table_id}")
        unpaid = [bill for bill in self._bill_repository.list_for_table(table_id) if not bill.is_paid]
        if not unpaid:
            raise BillNotFoundError(f"no open bill for table_id={table_id}")
        unpaid.sort(key=lambda bill: bill.created_at)
        return to_bill_response(unpaid[-1])


class SplitBill:
    def __init__(self, bill_repository: BillRepository) -> None:
        self._bill_repository = bill_repository

    def execute(self, bill_id: BillId, ways: int) -> BillSplitResponse:
        bill = _load_bill(self._bill_repository, bill_id)
        try:
            shares = bill.split(ways)
        except InvalidSplitError as exc:
            raise InvalidBillSplitError(str(exc)) from exc
        return BillSplitResponse(
            billId=str(bill.bill_id),
            ways=ways,
            shares=[to_money_response(share) for share in shares],
        )
