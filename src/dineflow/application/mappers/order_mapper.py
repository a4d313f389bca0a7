from __future__ import annotations

from dineflow.application.dto.responses import OrderLineResponse, OrderResponse
from dineflow.application.mappers.money_mapper import to_money_response
from dineflow.domain.order.entities import Order


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        orderId=str(order.order_id),
        tableId=str(order.table_id),
        status=order.status.value,
        lines=[
            OrderLineResponse(
                lineId=str(line.line_id),
                menuItemId=str(line.item_id),
                name=line.name,
                quantity=line.quantity,
                unitPrice=to_money_response(line.unit_price),
                lineTotal=to_money_response(line.line_total),
                specialRequests=line.special_requests,
            )
            for line in order.lines
        ],
        taxRate=float(order.tax_rate),
        subtotal=to_money_response(order.subtotal),
        tax=to_money_response(order.tax),
        total=to_money_response(order.total),
        createdAt=order.created_at,
        updatedAt=order.updated_at,
        completedAt=order.completed_at,
        customerId=str(order.customer_id) if order.customer_id else None,
    )
