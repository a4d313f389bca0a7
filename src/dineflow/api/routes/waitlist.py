from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from dineflow.api.auth import require_any_role, require_staff
from dineflow.api.dependencies import current_trace_context, get_publisher, get_stores
from dineflow.application.dto.requests import (
    AddWaitlistRequest,
    SeatWaitlistRequest,
    UpdateWaitlistRequest,
)
from dineflow.application.dto.responses import (
    SeatWaitlistResponse,
    WaitlistEntryResponse,
    WaitlistResponse,
)
from dineflow.application.use_cases.floor import AllocateTable
from dineflow.application.use_cases.waitlist import (
    AddToWaitlist,
    ListWaitlist,
    RemoveFromWaitlist,
    SeatWaitlistParty,
    UpdateWaitlistEntry,
)
from dineflow.domain.common.ids import TableId, WaitlistEntryId
from dineflow.domain.waitlist.entities import WaitlistStatus

router = APIRouter()


@router.post(
    "/v1/waitlist",
    response_model=WaitlistEntryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_any_role)],
)
def add_to_waitlist(request_dto: AddWaitlistRequest) -> WaitlistEntryResponse:
    stores = get_stores()
    use_case = AddToWaitlist(
        waitlist_repository=stores.waitlist,
        table_repository=stores.tables,
        publisher=get_publisher(),
    )
    return use_case.execute(request_dto, trace_ctx=current_trace_context())


@router.get(
    "/v1/waitlist",
    response_model=WaitlistResponse,
    dependencies=[Depends(require_staff)],
)
def list_waitlist() -> WaitlistResponse:
    stores = get_stores()
    return ListWaitlist(
        waitlist_repository=stores.waitlist,
        table_repository=stores.tables,
    ).execute()


@router.put(
    "/v1/waitlist/{entry_id}",
    response_model=WaitlistEntryResponse,
    dependencies=[Depends(require_staff)],
)
def update_waitlist_entry(entry_id: str, request_dto: UpdateWaitlistRequest) -> WaitlistEntryResponse:
    use_case = UpdateWaitlistEntry(waitlist_repository=get_stores().waitlist)
    return use_case.execute(WaitlistEntryId(entry_id), request_dto)


@router.delete(
    "/v1/waitlist/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_staff)],
)
def remove_from_waitlist(
    entry_id: str,
    reason: WaitlistStatus = WaitlistStatus.CANCELLED,
) -> Response:
    use_case = RemoveFromWaitlist(
        waitlist_repository=get_stores().waitlist,
        publisher=get_publisher(),
    )
    use_case.execute(WaitlistEntryId(entry_id), reason=reason, trace_ctx=current_trace_context())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/v1/waitlist/{entry_id}/seat",
    response_model=SeatWaitlistResponse,
    dependencies=[Depends(require_staff)],
)
def seat_waitlist_party(entry_id: str, request_dto: SeatWaitlistRequest) -> SeatWaitlistResponse:
    stores = get_stores()
    publisher = get_publisher()
    use_case = SeatWaitlistParty(
        waitlist_repository=stores.waitlist,
        allocate_table=AllocateTable(table_repository=stores.tables, publisher=publisher),
        remove_from_waitlist=RemoveFromWaitlist(
            waitlist_repository=stores.waitlist,
            publisher=publisher,
        ),
    )
    return use_case.execute(
        WaitlistEntryId(entry_id),
        TableId(request_dto.table_id),
        trace_ctx=current_trace_context(),
    )
