from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from dineflow.api.auth import require_staff
from dineflow.api.dependencies import (
    current_trace_context,
    get_payment_gateway,
    get_publisher,
    get_stores,
)
from dineflow.application.dto.requests import PayBillRequest
from dineflow.application.dto.responses import BillResponse, BillSplitResponse, SettleBillResponse
from dineflow.application.use_cases.billing import (
    GenerateBill,
    GetBill,
    PayBill,
    SettleBill,
    SplitBill,
)
from dineflow.domain.common.ids import BillId, TableId

router = APIRouter(dependencies=[Depends(require_staff)])


@router.post(
    "/v1/bills/{table_id}",
    response_model=BillResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_bill(table_id: str) -> BillResponse:
    stores = get_stores()
    use_case = GenerateBill(
        order_repository=stores.orders,
        table_repository=stores.tables,
        bill_repository=stores.bills,
        publisher=get_publisher(),
    )
    return use_case.execute(TableId(table_id), trace_ctx=current_trace_context())


@router.get("/v1/bills/{bill_id}", response_model=BillResponse)
def get_bill(bill_id: str) -> BillResponse:
    return GetBill(bill_repository=get_stores().bills).execute(BillId(bill_id))


@router.post("/v1/bills/{bill_id}/pay", response_model=SettleBillResponse)
def pay_bill(bill_id: str, request_dto: PayBillRequest) -> SettleBillResponse:
    stores = get_stores()
    use_case = PayBill(
        bill_repository=stores.bills,
        order_repository=stores.orders,
        payment_gateway=get_payment_gateway(),
        publisher=get_publisher(),
    )
    return use_case.execute(
        BillId(bill_id),
        request_dto.payment_method,
        trace_ctx=current_trace_context(),
    )


@router.post("/v1/bills/{bill_id}/settle", response_model=SettleBillResponse)
def settle_bill(bill_id: str) -> SettleBillResponse:
    stores = get_stores()
    return SettleBill(bill_repository=stores.bills, order_repository=stores.orders).execute(
        BillId(bill_id)
    )


@router.get("/v1/bills/{bill_id}/split", response_model=BillSplitResponse)
def split_bill(bill_id: str, ways: int = Query(default=2)) -> BillSplitResponse:
    return SplitBill(bill_repository=get_stores().bills).execute(BillId(bill_id), ways)
