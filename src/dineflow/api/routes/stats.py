from __future__ import annotations

from fastapi import APIRouter, Depends

from dineflow.api.auth import require_owner, require_staff
from dineflow.api.dependencies import get_stores
from dineflow.application.dto.responses import AnalyticsSummaryResponse, FloorStatsResponse
from dineflow.application.use_cases.stats import GetAnalyticsSummary, GetFloorStats

router = APIRouter()


@router.get(
    "/v1/stats",
    response_model=FloorStatsResponse,
    dependencies=[Depends(require_staff)],
)
def floor_stats() -> FloorStatsResponse:
    stores = get_stores()
    return GetFloorStats(
        table_repository=stores.tables,
        waitlist_repository=stores.waitlist,
    ).execute()


@router.get(
    "/v1/analytics/summary",
    response_model=AnalyticsSummaryResponse,
    dependencies=[Depends(require_owner)],
)
def analytics_summary() -> AnalyticsSummaryResponse:
    stores = get_stores()
    return GetAnalyticsSummary(
        order_repository=stores.orders,
        settings_repository=stores.settings,
    ).execute()
