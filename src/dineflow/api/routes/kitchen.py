from __future__ import annotations

from fastapi import APIRouter, Depends

from dineflow.api.auth import require_staff
from dineflow.api.dependencies import get_stores
from dineflow.application.dto.responses import OrderListResponse
from dineflow.application.use_cases.orders import KitchenQueue

router = APIRouter(dependencies=[Depends(require_staff)])


@router.get("/v1/kitchen/queue", response_model=OrderListResponse)
def kitchen_queue() -> OrderListResponse:
    return KitchenQueue(order_repository=get_stores().orders).execute()
