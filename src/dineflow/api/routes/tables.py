from __future__ import annotations

from fastapi import APIRouter, Depends, status

from dineflow.api.auth import require_owner, require_staff
from dineflow.api.dependencies import (
    current_trace_context,
    get_publisher,
    get_stores,
    public_base_url,
    qr_image_service_url,
)
from dineflow.application.dto.requests import (
    CreateTableRequest,
    SeatPartyRequest,
    UpdateTableRequest,
)
from dineflow.application.dto.responses import (
    BillResponse,
    TableListResponse,
    TableQrCodeResponse,
    TableResponse,
)
from dineflow.application.use_cases.billing import GetOpenBillForTable
from dineflow.application.use_cases.floor import (
    AllocateTable,
    CreateTable,
    GetTable,
    GetTableQrCode,
    ListTables,
    ReleaseTable,
    ReserveTable,
    UpdateTable,
)
from dineflow.domain.common.ids import TableId
from dineflow.domain.table.entities import TableStatus

router = APIRouter(dependencies=[Depends(require_staff)])
owner_router = APIRouter(dependencies=[Depends(require_owner)])


@owner_router.post(
    "/v1/tables",
    response_model=TableResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_table(request_dto: CreateTableRequest) -> TableResponse:
    return CreateTable(table_repository=get_stores().tables).execute(request_dto)


@router.get("/v1/tables", response_model=TableListResponse)
def list_tables(status: TableStatus | None = None) -> TableListResponse:
    return ListTables(table_repository=get_stores().tables).execute(status=status)


@router.get("/v1/tables/{table_id}", response_model=TableResponse)
def get_table(table_id: str) -> TableResponse:
    return GetTable(table_repository=get_stores().tables).execute(TableId(table_id))


@router.put("/v1/tables/{table_id}", response_model=TableResponse)
def update_table(table_id: str, request_dto: UpdateTableRequest) -> TableResponse:
    use_case = UpdateTable(table_repository=get_stores().tables, publisher=get_publisher())
    return use_case.execute(TableId(table_id), request_dto, trace_ctx=current_trace_context())


@router.post("/v1/tables/{table_id}/allocate", response_model=TableResponse)
def allocate_table(table_id: str, request_dto: SeatPartyRequest) -> TableResponse:
    use_case = AllocateTable(table_repository=get_stores().tables, publisher=get_publisher())
    return use_case.execute(
        TableId(table_id),
        request_dto.party_name,
        request_dto.party_size,
        trace_ctx=current_trace_context(),
    )


@router.post("/v1/tables/{table_id}/reserve", response_model=TableResponse)
def reserve_table(table_id: str, request_dto: SeatPartyRequest) -> TableResponse:
    use_case = ReserveTable(table_repository=get_stores().tables, publisher=get_publisher())
    return use_case.execute(
        TableId(table_id),
        request_dto.party_name,
        request_dto.party_size,
        trace_ctx=current_trace_context(),
    )


@router.post("/v1/tables/{table_id}/release", response_model=TableResponse)
def release_table(table_id: str) -> TableResponse:
    use_case = ReleaseTable(table_repository=get_stores().tables, publisher=get_publisher())
    return use_case.execute(TableId(table_id), trace_ctx=current_trace_context())


@router.get("/v1/tables/{table_id}/qr-code", response_model=TableQrCodeResponse)
def table_qr_code(table_id: str) -> TableQrCodeResponse:
    use_case = GetTableQrCode(
        table_repository=get_stores().tables,
        public_base_url=public_base_url(),
        image_service_url=qr_image_service_url(),
    )
    return use_case.execute(TableId(table_id))


@router.get("/v1/tables/{table_id}/bill", response_model=BillResponse)
def open_bill_for_table(table_id: str) -> BillResponse:
    stores = get_stores()
    use_case = GetOpenBillForTable(bill_repository=stores.bills, table_repository=stores.tables)
    return use_case.execute(TableId(table_id))
