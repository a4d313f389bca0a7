from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from dineflow.domain.billing.entities import PaymentMethod, generate_bill
from dineflow.domain.common.ids import (
    BillId,
    MenuItemId,
    OrderId,
    OrderLineId,
    ReservationId,
    TableId,
    UserId,
    WaitlistEntryId,
)
from dineflow.domain.common.money import Money
from dineflow.domain.menu.entities import AvailabilityStatus, MenuItem
from dineflow.domain.order.entities import OrderLine, OrderStatus, create_pending_order
from dineflow.domain.reservation.entities import Reservation, ReservationStatus
from dineflow.domain.settings.entities import RestaurantSettings
from dineflow.domain.table.entities import Table, TablePosition, TableStatus
from dineflow.domain.waitlist.entities import WaitlistEntry, WaitlistStatus
from dineflow.infrastructure.db.models import (  # noqa: F401
    billing,
    order,
    reservation,
    settings,
    table,
    waitlist,
)
from dineflow.infrastructure.db.models.menu import Base
from dineflow.infrastructure.db.repositories.bill_repo import SqlAlchemyBillRepository
from dineflow.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository
from dineflow.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from dineflow.infrastructure.db.repositories.reservation_repo import SqlAlchemyReservationRepository
from dineflow.infrastructure.db.repositories.settings_repo import SqlAlchemySettingsRepository
from dineflow.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from dineflow.infrastructure.db.repositories.waitlist_repo import SqlAlchemyWaitlistRepository

NOW = datetime(2026, 10, 1, 19, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seated_table(engine) -> Table:
    seated = Table(
        table_id=TableId("tbl_005"),
        number=5,
        capacity=4,
        status=TableStatus.AVAILABLE,
        position=TablePosition(x=2.0, y=1.5),
    ).allocate("Diaz", 3, NOW)
    SqlAlchemyTableRepository(engine).save(seated)
    return seated


def _line(line_id: str, item_id: str, quantity: int, cents: int, requests: str | None = None) -> OrderLine:
    return OrderLine(
        line_id=OrderLineId(line_id),
        item_id=MenuItemId(item_id),
        name=item_id,
        quantity=quantity,
        unit_price=Money(amount_cents=cents, currency="USD"),
        special_requests=requests,
    )


def test_menu_item_round_trip(engine) -> None:
    repository = SqlAlchemyMenuRepository(engine)
    item = MenuItem(
        item_id=MenuItemId("itm_001"),
        name="Margherita",
        description="Tomato, mozzarella",
        price_money=Money(amount_cents=1450, currency="USD"),
        category="mains",
        availability=AvailabilityStatus.LIMITED,
        prep_time_minutes=18,
        updated_at=NOW,
    )

    repository.save(item)
    repository.save(item.archive(NOW + timedelta(hours=1)))

    stored = repository.get(MenuItemId("itm_001"))
    assert stored is not None
    assert stored.is_archived
    assert stored.price_money == item.price_money
    assert stored.updated_at == NOW + timedelta(hours=1)
    assert len(repository.list_items()) == 1


def test_table_keeps_occupant_and_position(engine, seated_table) -> None:
    repository = SqlAlchemyTableRepository(engine)

    stored = repository.get(TableId("tbl_005"))

    assert stored == seated_table
    assert repository.get_by_number(5) == seated_table
    assert repository.get_by_number(6) is None

    repository.save(stored.release(NOW))
    released = repository.get(TableId("tbl_005"))
    assert released.status == TableStatus.AVAILABLE
    assert released.occupant is None


def test_order_lines_keep_their_order_after_update(engine, seated_table) -> None:
    repository = SqlAlchemyOrderRepository(engine)
    placed = create_pending_order(
        order_id=OrderId("ord_001"),
        table_id=seated_table.table_id,
        lines=[_line("orl_1", "itm_b", 1, 500), _line("orl_2", "itm_a", 2, 1000, "no onions")],
        tax_rate=Decimal("0.08"),
        now=NOW,
    )
    repository.add(placed)

    grown = placed.add_lines([_line("orl_3", "itm_b", 2, 500), _line("orl_4", "itm_c", 1, 300)], NOW)
    repository.update(grown.advance(OrderStatus.PREPARING, NOW))

    stored = repository.get(OrderId("ord_001"))
    assert stored is not None
    assert [(str(line.line_id), line.quantity) for line in stored.lines] == [
        ("orl_1", 3),
        ("orl_2", 2),
        ("orl_4", 1),
    ]
    assert stored.lines[1].special_requests == "no onions"
    assert stored.status == OrderStatus.PREPARING
    assert stored.total == grown.total
    assert stored.tax_rate == Decimal("0.08")


def test_list_orders_filters_by_table_and_status(engine, seated_table) -> None:
    repository = SqlAlchemyOrderRepository(engine)
    for index in range(3):
        repository.add(
            create_pending_order(
                order_id=OrderId(f"ord_{index}"),
                table_id=seated_table.table_id,
                lines=[_line(f"orl_{index}", "itm_a", 1, 1000)],
                tax_rate=Decimal("0.08"),
                now=NOW + timedelta(minutes=index),
            )
        )
    first = repository.get(OrderId("ord_0"))
    repository.update(first.advance(OrderStatus.PREPARING, NOW))

    pending = repository.list_orders(table_id=seated_table.table_id, statuses=[OrderStatus.PENDING])
    other_table = repository.list_orders(table_id=TableId("tbl_999"))

    assert [str(item.order_id) for item in pending] == ["ord_1", "ord_2"]
    assert other_table == []


def test_bill_round_trip_and_payment(engine, seated_table) -> None:
    orders = SqlAlchemyOrderRepository(engine)
    bills = SqlAlchemyBillRepository(engine)
    completed = []
    for index in range(2):
        placed = create_pending_order(
            order_id=OrderId(f"ord_{index}"),
            table_id=seated_table.table_id,
            lines=[_line(f"orl_{index}", "itm_a", 1, 1000)],
            tax_rate=Decimal("0.08"),
            now=NOW,
        )
        for status in (OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.COMPLETED):
            placed = placed.advance(status, NOW)
        orders.add(placed)
        completed.append(placed)

    bill = generate_bill(BillId("bil_001"), seated_table.table_id, completed, NOW)
    bills.add(bill)
    bills.update(bill.pay(PaymentMethod.CARD, NOW, processor_reference="ch_1"))

    stored = bills.get(BillId("bil_001"))
    assert stored.order_ids == (OrderId("ord_0"), OrderId("ord_1"))
    assert stored.total_amount.amount_cents == 2160
    assert stored.is_paid
    assert stored.payment_method == PaymentMethod.CARD
    assert stored.paid_at == NOW
    assert [item.bill_id for item in bills.list_for_table(seated_table.table_id)] == ["bil_001"]


def test_waitlist_round_trip(engine) -> None:
    repository = SqlAlchemyWaitlistRepository(engine)
    entry = WaitlistEntry(
        entry_id=WaitlistEntryId("wl_001"),
        party_name="Okafor",
        party_size=4,
        created_at=NOW,
        estimated_wait_minutes=45,
        phone="555-0100",
    )
    repository.add(entry)
    repository.add(
        WaitlistEntry(
            entry_id=WaitlistEntryId("wl_002"),
            party_name="Ito",
            party_size=2,
            created_at=NOW,
            estimated_wait_minutes=15,
        )
    )
    repository.update(entry.mark_notified().close(WaitlistStatus.SEATED))

    stored = repository.get(WaitlistEntryId("wl_001"))
    assert stored.status == WaitlistStatus.SEATED
    assert stored.notified
    assert stored.phone == "555-0100"
    waiting = repository.list_entries(status=WaitlistStatus.WAITING)
    assert [str(item.entry_id) for item in waiting] == ["wl_002"]


def test_reservation_round_trip_orders_by_time(engine, seated_table) -> None:
    repository = SqlAlchemyReservationRepository(engine)
    later = Reservation(
        reservation_id=ReservationId("rsv_002"),
        customer_name="Okafor",
        party_size=4,
        reserved_for=NOW + timedelta(days=1, hours=1),
        created_at=NOW,
        updated_at=NOW,
        phone="555-0101",
        table_id=seated_table.table_id,
        notes="window seat",
        customer_id=UserId("usr_okafor"),
    )
    repository.add(later)
    repository.add(
        Reservation(
            reservation_id=ReservationId("rsv_001"),
            customer_name="Ito",
            party_size=2,
            reserved_for=NOW + timedelta(days=1),
            created_at=NOW,
            updated_at=NOW,
        )
    )
    repository.update(later.transition(ReservationStatus.CONFIRMED, NOW))

    stored = repository.get(ReservationId("rsv_002"))
    assert stored.status == ReservationStatus.CONFIRMED
    assert stored.reserved_for == NOW + timedelta(days=1, hours=1)
    assert stored.table_id == seated_table.table_id
    assert stored.customer_id == "usr_okafor"
    assert stored.notes == "window seat"
    assert [str(item.reservation_id) for item in repository.list_reservations()] == ["rsv_001", "rsv_002"]
    confirmed = repository.list_reservations(status=ReservationStatus.CONFIRMED)
    assert [str(item.reservation_id) for item in confirmed] == ["rsv_002"]


def test_settings_single_row(engine) -> None:
    repository = SqlAlchemySettingsRepository(engine)
    assert repository.get() is None

    repository.save(RestaurantSettings(restaurant_name="Casa Nova"))
    repository.save(RestaurantSettings(restaurant_name="Casa Nova", tax_rate=Decimal("0.0725")))

    stored = repository.get()
    assert stored.restaurant_name == "Casa Nova"
    assert stored.tax_rate == Decimal("0.0725")
