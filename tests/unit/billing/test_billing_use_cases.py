from __future__ import annotations

import json
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dineflow.application.ports.payments import PaymentProcessorUnavailableError, PaymentResult
from dineflow.application.use_cases.billing import (
    BillAlreadyPaidError,
    BillNotFoundError,
    BillNotPaidError,
    GenerateBill,
    GetOpenBillForTable,
    InvalidBillSplitError,
    NoCompletedOrdersError,
    PayBill,
    PaymentDeclinedError,
    SettleBill,
    SplitBill,
)
from dineflow.application.use_cases.floor import TableNotFoundError
from dineflow.domain.billing.entities import PaymentMethod
from dineflow.domain.common.ids import BillId, MenuItemId, OrderId, OrderLineId, TableId
from dineflow.domain.common.money import Money
from dineflow.domain.order.entities import Order, OrderLine, OrderStatus, create_pending_order
from dineflow.domain.table.entities import Table, TableStatus
from dineflow.infrastructure.memory.repositories import (
    InMemoryBillRepository,
    InMemoryOrderRepository,
    InMemoryTableRepository,
)

START = datetime(2026, 10, 1, 19, 0, tzinfo=timezone.utc)


class FakePublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        self.messages.append((channel, message))


class FakeGateway:
    def __init__(self, result: PaymentResult) -> None:
        self.result = result
        self.charges: list[tuple[Money, str]] = []

    def charge(self, amount: Money, reference: str) -> PaymentResult:
        self.charges.append((amount, reference))
        return self.result


class FlakyOrderRepository(InMemoryOrderRepository):
    """Refuses updates for the given order ids until ``heal`` is called."""

    def __init__(self, broken: set[str]) -> None:
        super().__init__()
        self._broken = broken

    def heal(self) -> None:
        self._broken = set()

    def update(self, order: Order) -> None:
        if str(order.order_id) in self._broken:
            raise RuntimeError("write failed")
        super().update(order)


def _order(order_id: str, cents: int, status: OrderStatus, minutes: int = 0) -> Order:
    now = START + timedelta(minutes=minutes)
    order = create_pending_order(
        order_id=OrderId(order_id),
        table_id=TableId("tbl_005"),
        lines=[
            OrderLine(
                line_id=OrderLineId(f"orl_{order_id}"),
                item_id=MenuItemId("itm_a"),
                name="Dish",
                quantity=1,
                unit_price=Money(amount_cents=cents, currency="USD"),
            )
        ],
        tax_rate=Decimal("0.08"),
        now=now,
    )
    for step in (OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.COMPLETED, OrderStatus.PAID):
        if order.status == status:
            break
        order = order.advance(step, now)
    return order


def _setup(order_repository: InMemoryOrderRepository | None = None):
    tables = InMemoryTableRepository()
    tables.save(Table(table_id=TableId("tbl_005"), number=5, capacity=4, status=TableStatus.OCCUPIED))
    orders = order_repository or InMemoryOrderRepository()
    orders.add(_order("ord_1", 2000, OrderStatus.COMPLETED, minutes=0))
    orders.add(_order("ord_2", 1000, OrderStatus.COMPLETED, minutes=5))
    orders.add(_order("ord_3", 500, OrderStatus.PREPARING, minutes=10))
    return tables, orders, InMemoryBillRepository()


def test_generate_bill_covers_completed_orders_only() -> None:
    tables, orders, bills = _setup()
    publisher = FakePublisher()

    bill = GenerateBill(orders, tables, bills, publisher).execute(TableId("tbl_005"))

    assert bill.orderIds == ["ord_1", "ord_2"]
    assert bill.totalAmount.amountCents == 2160 + 1080
    assert not bill.isPaid
    assert json.loads(publisher.messages[0][1])["event_type"] == "bill.generated"


def test_generate_bill_skips_orders_already_on_a_bill() -> None:
    tables, orders, bills = _setup()
    generate = GenerateBill(orders, tables, bills, FakePublisher())
    generate.execute(TableId("tbl_005"))

    with pytest.raises(NoCompletedOrdersError):
        generate.execute(TableId("tbl_005"))


def test_generate_bill_for_unknown_table() -> None:
    tables, orders, bills = _setup()
    with pytest.raises(TableNotFoundError):
        GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_missing"))


def test_bill_total_is_a_snapshot() -> None:
    tables, orders, bills = _setup()
    bill = GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_005"))

    stored = bills.get(BillId(bill.billId))
    assert stored is not None
    orders.update(_order("ord_1", 9999, OrderStatus.COMPLETED))
    assert bills.get(BillId(bill.billId)).total_amount == stored.total_amount


def test_cash_payment_settles_orders_and_leaves_table_occupied() -> None:
    tables, orders, bills = _setup()
    bill = GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_005"))
    publisher = FakePublisher()

    result = PayBill(bills, orders, None, publisher).execute(BillId(bill.billId), PaymentMethod.CASH)

    assert result.bill.isPaid
    assert result.bill.paymentMethod == "cash"
    assert result.settledOrderIds == ["ord_1", "ord_2"]
    assert result.failedOrderIds == []
    assert orders.get(OrderId("ord_1")).status == OrderStatus.PAID
    assert orders.get(OrderId("ord_3")).status == OrderStatus.PREPARING
    assert tables.get(TableId("tbl_005")).status == TableStatus.OCCUPIED
    assert json.loads(publisher.messages[0][1])["event_type"] == "bill.paid"


def test_card_payment_goes_through_the_gateway() -> None:
    tables, orders, bills = _setup()
    bill = GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_005"))
    gateway = FakeGateway(PaymentResult(succeeded=True, processor_reference="ch_42"))

    result = PayBill(bills, orders, gateway, FakePublisher()).execute(BillId(bill.billId), PaymentMethod.CARD)

    assert gateway.charges == [(Money(amount_cents=3240, currency="USD"), bill.billId)]
    assert result.bill.processorReference == "ch_42"


def test_declined_payment_leaves_bill_unpaid() -> None:
    tables, orders, bills = _setup()
    bill = GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_005"))
    gateway = FakeGateway(PaymentResult(succeeded=False, processor_reference=None, failure_reason="card_declined"))

    with pytest.raises(PaymentDeclinedError, match="card_declined"):
        PayBill(bills, orders, gateway, FakePublisher()).execute(BillId(bill.billId), PaymentMethod.CARD)

    assert not bills.get(BillId(bill.billId)).is_paid
    assert orders.get(OrderId("ord_1")).status == OrderStatus.COMPLETED


def test_card_payment_without_a_gateway_is_unavailable() -> None:
    tables, orders, bills = _setup()
    bill = GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_005"))

    with pytest.raises(PaymentProcessorUnavailableError):
        PayBill(bills, orders, None, FakePublisher()).execute(BillId(bill.billId), PaymentMethod.DIGITAL)


def test_paying_twice_is_rejected() -> None:
    tables, orders, bills = _setup()
    bill = GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_005"))
    pay = PayBill(bills, orders, None, FakePublisher())
    pay.execute(BillId(bill.billId), PaymentMethod.CASH)

    with pytest.raises(BillAlreadyPaidError):
        pay.execute(BillId(bill.billId), PaymentMethod.CASH)


def test_pay_unknown_bill() -> None:
    _, orders, bills = _setup()
    with pytest.raises(BillNotFoundError):
        PayBill(bills, orders, None, FakePublisher()).execute(BillId("bil_missing"), PaymentMethod.CASH)


def test_settlement_failure_is_reported_and_can_be_retried() -> None:
    orders = FlakyOrderRepository({"ord_2"})
    tables, orders, bills = _setup(orders)
    bill = GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_005"))

    result = PayBill(bills, orders, None, FakePublisher()).execute(BillId(bill.billId), PaymentMethod.CASH)

    assert result.bill.isPaid
    assert result.settledOrderIds == ["ord_1"]
    assert result.failedOrderIds == ["ord_2"]
    assert orders.get(OrderId("ord_2")).status == OrderStatus.COMPLETED

    orders.heal()
    retried = SettleBill(bills, orders).execute(BillId(bill.billId))

    assert retried.settledOrderIds == ["ord_1", "ord_2"]
    assert retried.failedOrderIds == []
    assert orders.get(OrderId("ord_2")).status == OrderStatus.PAID


def test_settle_requires_a_paid_bill() -> None:
    tables, orders, bills = _setup()
    bill = GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_005"))

    with pytest.raises(BillNotPaidError):
        SettleBill(bills, orders).execute(BillId(bill.billId))


def test_open_bill_for_table_ignores_paid_bills() -> None:
    tables, orders, bills = _setup()
    bill = GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_005"))
    lookup = GetOpenBillForTable(bills, tables)

    assert lookup.execute(TableId("tbl_005")).billId == bill.billId

    PayBill(bills, orders, None, FakePublisher()).execute(BillId(bill.billId), PaymentMethod.CASH)
    with pytest.raises(BillNotFoundError):
        lookup.execute(TableId("tbl_005"))


def test_split_bill() -> None:
    tables, orders, bills = _setup()
    bill = GenerateBill(orders, tables, bills, FakePublisher()).execute(TableId("tbl_005"))
    split = SplitBill(bills)

    response = split.execute(BillId(bill.billId), 3)

    assert [share.amountCents for share in response.shares] == [1080, 1080, 1080]
    with pytest.raises(InvalidBillSplitError):
        split.execute(BillId(bill.billId), 0)
