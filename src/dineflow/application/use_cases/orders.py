from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from dineflow.application.dto.requests import (
    AddOrderLinesRequest,
    CreateOrderRequest,
    OrderLineRequest,
)
from dineflow.application.dto.responses import (
    CartQuoteLineResponse,
    CartQuoteResponse,
    OrderListResponse,
    OrderResponse,
)
from dineflow.application.mappers.event_envelope import serialize_order_event
from dineflow.application.mappers.money_mapper import to_money_response
from dineflow.application.mappers.order_mapper import to_order_response
from dineflow.application.metrics.lifecycle import (
    record_order_status,
    record_time_to_ready,
    record_transition,
)
from dineflow.application.ports.publisher import EventPublisher
from dineflow.application.ports.repositories import (
    MenuRepository,
    OrderRepository,
    SettingsRepository,
    TableRepository,
)
from dineflow.application.use_cases.catalog import MenuItemNotFoundError
from dineflow.application.use_cases.context import EMPTY_TRACE, TraceContext
from dineflow.application.use_cases.floor import TableNotFoundError
from dineflow.application.use_cases.publishing import publish_event
from dineflow.application.use_cases.settings import current_settings
from dineflow.domain.cart.entities import Cart
from dineflow.domain.common.ids import MenuItemId, OrderId, OrderLineId, TableId, UserId
from dineflow.domain.common.money import apply_rate
from dineflow.domain.order.entities import EmptyOrderError as DomainEmptyOrderError
from dineflow.domain.order.entities import (
    KITCHEN_STATUSES,
    Order,
    OrderLine,
    OrderStatus,
    OrderTransitionError,
    create_pending_order,
)
from dineflow.domain.order.entities import OrderClosedError as DomainOrderClosedError

logger = logging.getLogger(__name__)


class OrderNotFoundError(Exception):
    pass


class MenuItemUnavailableError(Exception):
    pass


class EmptyOrderError(Exception):
    pass


class OrderClosedError(Exception):
    pass


class InvalidOrderTransitionError(Exception):
    pass


def build_cart(
    menu_repository: MenuRepository,
    currency: str,
    request_lines: list[OrderLineRequest],
) -> Cart:
    """Price request lines against the catalog, snapshotting each unit price."""
    cart = Cart(currency=currency)
    for request_line in request_lines:
        item = menu_repository.get(MenuItemId(request_line.menu_item_id))
        if item is None or item.is_archived:
            raise MenuItemNotFoundError(f"menu item {request_line.menu_item_id} does not exist")
        if not item.is_orderable:
            raise MenuItemUnavailableError(f"menu item {request_line.menu_item_id} is unavailable")
        if item.price_money.currency != currency:
            raise MenuItemUnavailableError(
                f"menu item {request_line.menu_item_id} is priced in {item.price_money.currency}"
            )
        cart.add(item, quantity=request_line.quantity, special_requests=request_line.special_requests)
    return cart


def _order_lines(cart: Cart) -> list[OrderLine]:
    return [
        OrderLine(
            line_id=OrderLineId(f"orl_{uuid4().hex[:12]}"),
            item_id=line.menu_item_id,
            name=line.name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            special_requests=line.special_requests,
        )
        for line in cart.lines
    ]


def _load_order(order_repository: OrderRepository, order_id: OrderId) -> Order:
    order = order_repository.get(order_id)
    if order is None:
        raise OrderNotFoundError(f"order not found for order_id={order_id}")
    return order


class QuoteCart:
    def __init__(
        self,
        menu_repository: MenuRepository,
        settings_repository: SettingsRepository,
    ) -> None:
        self._menu_repository = menu_repository
        self._settings_repository = settings_repository

    def execute(self, request_lines: list[OrderLineRequest]) -> CartQuoteResponse:
        settings = current_settings(self._settings_repository)
        cart = build_cart(self._menu_repository, settings.currency, request_lines)
        subtotal = cart.total
        tax = apply_rate(subtotal, settings.tax_rate)
        return CartQuoteResponse(
            lines=[
                CartQuoteLineResponse(
                    menuItemId=str(line.menu_item_id),
                    name=line.name,
                    quantity=line.quantity,
                    unitPrice=to_money_response(line.unit_price),
                    lineTotal=to_money_response(line.line_total),
                    specialRequests=line.special_requests,
                )
                for line in cart.lines
            ],
            itemCount=cart.item_count,
            taxRate=float(settings.tax_rate),
            subtotal=to_money_response(subtotal),
            tax=to_money_response(tax),
            total=to_money_response(subtotal.plus(tax)),
        )


class CreateOrder:
    def __init__(
        self,
        menu_repository: MenuRepository,
        table_repository: TableRepository,
        order_repository: OrderRepository,
        settings_repository: SettingsRepository,
        publisher: EventPublisher,
    ) -> None:
        self._menu_repository = menu_repository
        self._table_repository = table_repository
        self._order_repository = order_repository
        self._settings_repository = settings_repository
        self._publisher = publisher

    def execute(
        self,
        request_dto: CreateOrderRequest,
        trace_ctx: TraceContext = EMPTY_TRACE,
        customer_id: UserId | None = None,
    ) -> OrderResponse:
        if not request_dto.lines:
            raise EmptyOrderError("order must contain at least one line")

        table_id = TableId(request_dto.table_id)
        if self._table_repository.get(table_id) is None:
            raise TableNotFoundError(f"table not found for table_id={table_id}")

        settings = current_settings(self._settings_repository)
        cart = build_cart(self._menu_repository, settings.currency, request_dto.lines)
        now = datetime.now(timezone.utc)
        try:
            order = create_pending_order(
                order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
                table_id=table_id,
                lines=_order_lines(cart),
                tax_rate=settings.tax_rate,
                now=now,
                customer_id=customer_id,
            )
        except DomainEmptyOrderError as exc:
            raise EmptyOrderError(str(exc)) from exc

        self._order_repository.add(order)
        record_order_status(order)
        logger.info(
            "order_created",
            extra={"order_id": order.order_id, "table_id": order.table_id},
        )
        message = serialize_order_event(
            event_type="order.created",
            occurred_at=order.created_at,
            order=order,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        publish_event(self._publisher, "order.created", message)
        return to_order_response(order)


class AddOrderLines:
    def __init__(
        self,
        menu_repository: MenuRepository,
        order_repository: OrderRepository,
        publisher: EventPublisher,
    ) -> None:
        self._menu_repository = menu_repository
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId,
        request_dto: AddOrderLinesRequest,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> OrderResponse:
        order = _load_order(self._order_repository, order_id)
        if not order.is_open:
            raise OrderClosedError(
                f"order {order.order_id} is {order.status.value}; lines can no longer be added"
            )
        if not request_dto.lines:
            raise EmptyOrderError("at least one line is required")

        cart = build_cart(self._menu_repository, order.subtotal.currency, request_dto.lines)
        now = datetime.now(timezone.utc)
        try:
            updated = order.add_lines(_order_lines(cart), now)
        except DomainOrderClosedError as exc:
            raise OrderClosedError(str(exc)) from exc

        self._order_repository.update(updated)
        message = serialize_order_event(
            event_type="order.lines_added",
            occurred_at=now,
            order=updated,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        publish_event(self._publisher, "order.lines_added", message)
        return to_order_response(updated)


class AdvanceOrderStatus:
    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId,
        next_status: OrderStatus,
        trace_ctx: TraceContext = EMPTY_TRACE,
    ) -> OrderResponse:
        order = _load_order(self._order_repository, order_id)
        now = datetime.now(timezone.utc)
        try:
            updated = order.advance(next_status, now)
        except OrderTransitionError as exc:
            raise InvalidOrderTransitionError(str(exc)) from exc

        self._order_repository.update(updated)
        record_transition(order.status, updated.status)
        record_order_status(updated)
        if updated.status == OrderStatus.READY:
            record_time_to_ready(updated, now)
        logger.info(
            "order_status_changed",
            extra={
                "order_id": updated.order_id,
                "from_status": order.status.value,
                "to_status": updated.status.value,
            },
        )
        message = serialize_order_event(
            event_type="order.status_changed",
            occurred_at=now,
            order=updated,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        publish_event(self._publisher, "order.status_changed", message)
        return to_order_response(updated)


class GetOrder:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, order_id: OrderId) -> OrderResponse:
        return to_order_response(_load_order(self._order_repository, order_id))


class ListOrders:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(
        self,
        table_id: TableId | None = None,
        status: OrderStatus | None = None,
    ) -> OrderListResponse:
        statuses = [status] if status is not None else None
        orders = self._order_repository.list_orders(table_id=table_id, statuses=statuses)
        orders.sort(key=lambda order: order.created_at)
        return OrderListResponse(orders=[to_order_response(order) for order in orders])


class KitchenQueue:
    """Orders the kitchen still has to act on, oldest first."""

    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self) -> OrderListResponse:
        orders = self._order_repository.list_orders(statuses=KITCHEN_STATUSES)
        orders.sort(key=lambda order: (order.created_at, str(order.order_id)))
        return OrderListResponse(orders=[to_order_response(order) for order in orders])
