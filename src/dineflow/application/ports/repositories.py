from __future__ import annotations

from collections.abc import Collection
from typing import Protocol

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


class MenuRepository(Protocol):
    def get(self, item_id: MenuItemId) -> MenuItem | None: ...

    def list_items(self) -> list[MenuItem]: ...

    def save(self, item: MenuItem) -> None: ...


class TableRepository(Protocol):
    def get(self, table_id: TableId) -> Table | None: ...

    def get_by_number(self, number: int) -> Table | None: ...

    def list_tables(self) -> list[Table]: ...

    def save(self, table: Table) -> None: ...


class OrderRepository(Protocol):
    def add(self, order: Order) -> None: ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def update(self, order: Order) -> None: ...

    def list_orders(
        self,
        table_id: TableId | None = None,
        statuses: Collection[OrderStatus] | None = None,
    ) -> list[Order]: ...


class BillRepository(Protocol):
    def add(self, bill: Bill) -> None: ...

    def get(self, bill_id: BillId) -> Bill | None: ...

    def update(self, bill: Bill) -> None: ...

    def list_for_table(self, table_id: TableId) -> list[Bill]: ...


class WaitlistRepository(Protocol):
    def add(self, entry: WaitlistEntry) -> None: ...

    def get(self, entry_id: WaitlistEntryId) -> WaitlistEntry | None: ...

    def update(self, entry: WaitlistEntry) -> None: ...

    def list_entries(self, status: WaitlistStatus | None = None) -> list[WaitlistEntry]: ...


class ReservationRepository(Protocol):
    def add(self, reservation: Reservation) -> None: ...

    def get(self, reservation_id: ReservationId) -> Reservation | None: ...

    def update(self, reservation: Reservation) -> None: ...

    def list_reservations(
        self,
        status: ReservationStatus | None = None,
    ) -> list[Reservation]: ...


class SettingsRepository(Protocol):
    def get(self) -> RestaurantSettings | None: ...

    def save(self, settings: RestaurantSettings) -> None: ...


class StoreUnavailableError(Exception):
    pass
