from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from dineflow.application.dto.responses import (
    AnalyticsSummaryResponse,
    FloorStatsResponse,
    PopularDishResponse,
)
from dineflow.application.mappers.money_mapper import to_money_response
from dineflow.application.ports.repositories import (
    OrderRepository,
    SettingsRepository,
    TableRepository,
    WaitlistRepository,
)
from dineflow.application.use_cases.settings import current_settings
from dineflow.application.use_cases.waitlist import waiting_entries
from dineflow.domain.common.money import Money, zero
from dineflow.domain.order.entities import OrderStatus
from dineflow.domain.table.entities import TableStatus
from dineflow.domain.waitlist.entities import estimate_wait_minutes

POPULAR_DISH_LIMIT = 5
REVENUE_STATUSES = (OrderStatus.COMPLETED, OrderStatus.PAID)


class GetFloorStats:
    """Occupancy figures recomputed from the floor and waitlist on every read."""

    def __init__(
        self,
        table_repository: TableRepository,
        waitlist_repository: WaitlistRepository,
    ) -> None:
        self._table_repository = table_repository
        self._waitlist_repository = waitlist_repository

    def execute(self) -> FloorStatsResponse:
        tables = self._table_repository.list_tables()
        occupied = [table for table in tables if table.status == TableStatus.OCCUPIED]
        available_count = sum(1 for table in tables if table.status == TableStatus.AVAILABLE)
        occupied_seats = sum(
            table.occupant.party_size if table.occupant is not None else table.capacity
            for table in occupied
        )
        waiting = waiting_entries(self._waitlist_repository)
        quoted = [entry.estimated_wait_minutes for entry in waiting]

        return FloorStatsResponse(
            occupancyRate=len(occupied) / len(tables) if tables else 0.0,
            totalTables=len(tables),
            occupiedTables=len(occupied),
            availableTables=available_count,
            totalSeats=sum(table.capacity for table in tables),
            occupiedSeats=occupied_seats,
            waitingParties=len(waiting),
            estimatedWaitMinutes=estimate_wait_minutes(len(waiting), available_count),
            averageQuotedWaitMinutes=sum(quoted) / len(quoted) if quoted else 0.0,
        )


class GetAnalyticsSummary:
    def __init__(
        self,
        order_repository: OrderRepository,
        settings_repository: SettingsRepository,
    ) -> None:
        self._order_repository = order_repository
        self._settings_repository = settings_repository

    def execute(self) -> AnalyticsSummaryResponse:
        orders = self._order_repository.list_orders(statuses=REVENUE_STATUSES)
        currency = current_settings(self._settings_repository).currency
        if orders:
            currency = orders[0].total.currency

        revenue = zero(currency)
        counted = 0
        quantities: Counter[str] = Counter()
        names: dict[str, str] = {}
        for order in orders:
            if order.total.currency != currency:
                continue
            revenue = revenue.plus(order.total)
            counted += 1
            for line in order.lines:
                quantities[str(line.item_id)] += line.quantity
                names.setdefault(str(line.item_id), line.name)

        average = zero(currency)
        if counted:
            cents = (Decimal(revenue.amount_cents) / counted).quantize(
                Decimal("1"), rounding=ROUND_HALF_UP
            )
            average = Money(amount_cents=int(cents), currency=currency)

        ranked = sorted(quantities.items(), key=lambda pair: (-pair[1], names[pair[0]]))
        return AnalyticsSummaryResponse(
            totalRevenue=to_money_response(revenue),
            totalOrders=len(orders),
            averageOrderValue=to_money_response(average),
            popularDishes=[
                PopularDishResponse(menuItemId=item_id, name=names[item_id], orderCount=count)
                for item_id, count in ranked[:POPULAR_DISH_LIMIT]
            ],
            generatedAt=datetime.now(timezone.utc),
        )
