from __future__ import annotations

from fastapi import APIRouter, Depends, status

from dineflow.api.auth import require_any_role, require_staff
from dineflow.api.dependencies import current_trace_context, get_publisher, get_stores
from dineflow.application.dto.requests import (
    AddOrderLinesRequest,
    CreateOrderRequest,
    UpdateOrderStatusRequest,
)
from dineflow.application.dto.responses import OrderListResponse, OrderResponse
from dineflow.application.use_cases.orders import (
    AddOrderLines,
    AdvanceOrderStatus,
    CreateOrder,
    GetOrder,
    ListOrders,
)
from dineflow.domain.common.ids import OrderId, TableId, UserId
from dineflow.domain.order.entities import OrderStatus
from dineflow.infrastructure.auth.tokens import Principal

router = APIRouter()


def _create_order_use_case() -> CreateOrder:
    stores = get_stores()
    return CreateOrder(
        menu_repository=stores.menu,
        table_repository=stores.tables,
        order_repository=stores.orders,
        settings_repository=stores.settings,
        publisher=get_publisher(),
    )


@router.post(
    "/v1/orders",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    request_dto: CreateOrderRequest,
    principal: Principal = Depends(require_any_role),
) -> OrderResponse:
    return _create_order_use_case().execute(
        request_dto,
        trace_ctx=current_trace_context(),
        customer_id=UserId(principal.user_id),
    )


@router.get(
    "/v1/orders",
    response_model=OrderListResponse,
    dependencies=[Depends(require_staff)],
)
def list_orders(
    table_id: str | None = None,
    status: OrderStatus | None = None,
) -> OrderListResponse:
    return ListOrders(order_repository=get_stores().orders).execute(
        table_id=TableId(table_id) if table_id else None,
        status=status,
    )


@router.get(
    "/v1/orders/{order_id}",
    response_model=OrderResponse,
    dependencies=[Depends(require_staff)],
)
def get_order(order_id: str) -> OrderResponse:
    return GetOrder(order_repository=get_stores().orders).execute(OrderId(order_id))


@router.put(
    "/v1/orders/{order_id}",
    response_model=OrderResponse,
    dependencies=[Depends(require_staff)],
)
def update_order_status(order_id: str, request_dto: UpdateOrderStatusRequest) -> OrderResponse:
    use_case = AdvanceOrderStatus(order_repository=get_stores().orders, publisher=get_publisher())
    return use_case.execute(OrderId(order_id), request_dto.status, trace_ctx=current_trace_context())


@router.post(
    "/v1/orders/{order_id}/lines",
    response_model=OrderResponse,
    dependencies=[Depends(require_staff)],
)
def add_order_lines(order_id: str, request_dto: AddOrderLinesRequest) -> OrderResponse:
    stores = get_stores()
    use_case = AddOrderLines(
        menu_repository=stores.menu,
        order_repository=stores.orders,
        publisher=get_publisher(),
    )
    return use_case.execute(OrderId(order_id), request_dto, trace_ctx=current_trace_context())
