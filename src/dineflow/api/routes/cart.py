from __future__ import annotations

from fastapi import APIRouter

from dineflow.api.dependencies import get_stores
from dineflow.application.dto.requests import CartQuoteRequest
from dineflow.application.dto.responses import CartQuoteResponse
from dineflow.application.use_cases.orders import QuoteCart

router = APIRouter()


@router.post("/v1/cart/quote", response_model=CartQuoteResponse)
def quote_cart(request_dto: CartQuoteRequest) -> CartQuoteResponse:
    stores = get_stores()
    use_case = QuoteCart(menu_repository=stores.menu, settings_repository=stores.settings)
    return use_case.execute(request_dto.lines)
