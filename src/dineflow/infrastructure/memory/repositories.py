from __future__ import annotations

from collections.abc import Collection
from threading import Lock

from dineflow.application.ports.repositories import (
    BillRepository,
    MenuRepository,
    OrderRepository,
    ReservationRepository,
    SettingsRepository,
    TableRepository,
    WaitlistRepository,
)
from dineflow.domain.billing.entities import Bill
from dineflow.domain.common.ids import (
    BillId,
    MenuItemId,
    OrderId,
    ReservationId,
    TableId,
    WaitlistEntryId,
)
from dineflow.domain.menu.entities import MenuItem
from dineflow.domain.order.entities import Order, OrderStatus
from dineflow.domain.reservation.entities import Reservation, ReservationStatus
from dineflow.domain.settings.entities import RestaurantSettings
from dineflow.domain.table.entities import Table
from dineflow.domain.waitlist.entities import WaitlistEntry, WaitlistStatus


class InMemoryMenuRepository(MenuRepository):
    def __init__(self) -> None:
        self._items: dict[str, MenuItem] = {}
        self._lock = Lock()

    def get(self, item_id: MenuItemId) -> MenuItem | None:
        return self._items.get(str(item_id))

    def list_items(self) -> list[MenuItem]:
        return list(self._items.values())

    def save(self, item: MenuItem) -> None:
        with self._lock:
            self._items[str(item.item_id)] = item


class InMemoryTableRepository(TableRepository):
    def __init__(self) -> None:
        self._tables: dict[str, Table] = {}
        self._lock = Lock()

    def get(self, table_id: TableId) -> Table | None:
        return self._tables.get(str(table_id))

    def get_by_number(self, number: int) -> Table | None:
        for table in self._tables.values():
            if table.number == number:
                return table
        return None

    def list_tables(self) -> list[Table]:
        return list(self._tables.values())

    def save(self, table: Table) -> None:
        with self._lock:
            self._tables[str(table.table_id)] = table


class InMemoryOrderRepository(OrderRepository):
    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = Lock()

    def add(self, order: Order) -> None:
        with self._lock:
            self._orders[str(order.order_id)] = order

    def get(self, order_id: OrderId) -> Order | None:
        return self._orders.get(str(order_id))

    def update(self, order: Order) -> None:
        with self._lock:
            self._orders[str(order.order_id)] = order

    def list_orders(
        self,
        table_id: TableId | None = None,
        statuses: Collection[OrderStatus] | None = None,
    ) -> list[Order]:
        orders = list(self._orders.values())
        if table_id is not None:
            orders = [order for order in orders if order.table_id == table_id]
        if statuses is not None:
            orders = [order for order in orders if order.status in statuses]
        return orders


class InMemoryBillRepository(BillRepository):
    def __init__(self) -> None:
        self._bills: dict[str, Bill] = {}
        self._lock = Lock()

    def add(self, bill: Bill) -> None:
        with self._lock:
            self._bills[str(bill.bill_id)] = bill

    def get(self, bill_id: BillId) -> Bill | None:
        return self._bills.get(str(bill_id))

    def update(self, bill: Bill) -> None:
        with self._lock:
            self._bills[str(bill.bill_id)] = bill

    def list_for_table(self, table_id: TableId) -> list[Bill]:
        return [bill for bill in self._bills.values() if bill.table_id == table_id]


class InMemoryWaitlistRepository(WaitlistRepository):
    def __init__(self) -> None:
        self._entries: dict[str, WaitlistEntry] = {}
        self._lock = Lock()

    def add(self, entry: WaitlistEntry) -> None:
        with self._lock:
            self._entries[str(entry.entry_id)] = entry

    def get(self, entry_id: WaitlistEntryId) -> WaitlistEntry | None:
        return self._entries.get(str(entry_id))

    def update(self, entry: WaitlistEntry) -> None:
        with self._lock:
            self._entries[str(entry.entry_id)] = entry

    def list_entries(self, status: WaitlistStatus | None = None) -> list[WaitlistEntry]:
        entries = list(self._entries.values())
        if status is not None:
            entries = [entry for entry in entries if entry.status == status]
        return entries


class InMemoryReservationRepository(ReservationRepository):
    def __init__(self) -> None:
        self._reservations: dict[str, Reservation] = {}
        self._lock = Lock()

    def add(self, reservation: Reservation) -> None:
        with self._lock:
            self._reservations[str(reservation.reservation_id)] = reservation

    def get(self, reservation_id: ReservationId) -> Reservation | None:
        return self._reservations.get(str(reservation_id))

    def update(self, reservation: Reservation) -> None:
        with self._lock:
            self._reservations[str(reservation.reservation_id)] = reservation

    def list_reservations(self, status: ReservationStatus | None = None) -> list[Reservation]:
        reservations = list(self._reservations.values())
        if status is not None:
            reservations = [item for item in reservations if item.status == status]
        return reservations


class InMemorySettingsRepository(SettingsRepository):
    def __init__(self) -> None:
        self._settings: RestaurantSettings | None = None

    def get(self) -> RestaurantSettings | None:
        return self._settings

    def save(self, settings: RestaurantSettings) -> None:
        self._settings = settings
