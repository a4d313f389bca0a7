from __future__ import annotations

from dineflow.application.dto.responses import (
    KitchenTicketLineResponse,
    KitchenTicketResponse,
    ReceiptLineResponse,
    ReceiptResponse,
)
from dineflow.application.mappers.money_mapper import to_money_response
from dineflow.application.ports.repositories import (
    MenuRepository,
    OrderRepository,
    SettingsRepository,
    TableRepository,
)
from dineflow.application.use_cases.orders import OrderNotFoundError
from dineflow.application.use_cases.settings import current_settings
from dineflow.domain.common.ids import OrderId
from dineflow.domain.order.entities import Order

DEFAULT_PREP_TIME_MINUTES = 15


def _printable_order(order_repository: OrderRepository, order_id: OrderId) -> Order:
    order = order_repository.get(order_id)
    if order is None:
        raise OrderNotFoundError(f"order not found for order_id={order_id}")
    return order


def _table_number(table_repository: TableRepository, order: Order) -> int | None:
    # tables can be removed after the order was taken
    table = table_repository.get(order.table_id)
    return table.number if table is not None else None


class GetOrderReceipt:
    """Customer-facing receipt; prices are the snapshots taken when the order was placed."""

    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        settings_repository: SettingsRepository,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository
        self._settings_repository = settings_repository

    def execute(self, order_id: OrderId) -> ReceiptResponse:
        order = _printable_order(self._order_repository, order_id)
        return ReceiptResponse(
            restaurantName=current_settings(self._settings_repository).restaurant_name,
            orderId=str(order.order_id),
            tableNumber=_table_number(self._table_repository, order),
            status=order.status.value,
            lines=[
                ReceiptLineResponse(
                    name=line.name,
                    quantity=line.quantity,
                    unitPrice=to_money_response(line.unit_price),
                    lineTotal=to_money_response(line.line_total),
                )
                for line in order.lines
            ],
            taxRate=float(order.tax_rate),
            subtotal=to_money_response(order.subtotal),
            tax=to_money_response(order.tax),
            total=to_money_response(order.total),
            createdAt=order.created_at,
        )


class GetKitchenTicket:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        menu_repository: MenuRepository,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository
        self._menu_repository = menu_repository

    def execute(self, order_id: OrderId) -> KitchenTicketResponse:
        order = _printable_order(self._order_repository, order_id)
        lines = []
        for line in order.lines:
            item = self._menu_repository.get(line.item_id)
            lines.append(
                KitchenTicketLineResponse(
                    name=line.name,
                    quantity=line.quantity,
                    category=item.category if item is not None else "",
                    prepTimeMinutes=(
                        item.prep_time_minutes if item is not None else DEFAULT_PREP_TIME_MINUTES
                    ),
                    specialRequests=line.special_requests,
                )
            )
        return KitchenTicketResponse(
            orderId=str(order.order_id),
            tableNumber=_table_number(self._table_repository, order),
            status=order.status.value,
            lines=lines,
            estimatedPrepMinutes=max(line.prepTimeMinutes for line in lines),
            createdAt=order.created_at,
        )
