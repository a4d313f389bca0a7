from __future__ import annotations

from fastapi import APIRouter, Depends

from dineflow.api.auth import require_staff
from dineflow.api.dependencies import get_stores
from dineflow.application.dto.responses import KitchenTicketResponse, ReceiptResponse
from dineflow.application.use_cases.printing import GetKitchenTicket, GetOrderReceipt
from dineflow.domain.common.ids import OrderId

router = APIRouter(dependencies=[Depends(require_staff)])


@router.get("/v1/print/receipt/{order_id}", response_model=ReceiptResponse)
def print_receipt(order_id: str) -> ReceiptResponse:
    stores = get_stores()
    use_case = GetOrderReceipt(
        order_repository=stores.orders,
        table_repository=stores.tables,
        settings_repository=stores.settings,
    )
    return use_case.execute(OrderId(order_id))


@router.get("/v1/print/kitchen-ticket/{order_id}", response_model=KitchenTicketResponse)
def print_kitchen_ticket(order_id: str) -> KitchenTicketResponse:
    stores = get_stores()
    use_case = GetKitchenTicket(
        order_repository=stores.orders,
        table_repository=stores.tables,
        menu_repository=stores.menu,
    )
    return use_case.execute(OrderId(order_id))
