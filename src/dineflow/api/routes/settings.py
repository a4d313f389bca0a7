from __future__ import annotations

from fastapi import APIRouter, Depends

from dineflow.api.auth import require_any_role, require_owner
from dineflow.api.dependencies import get_stores
from dineflow.application.dto.requests import UpdateSettingsRequest
from dineflow.application.dto.responses import SettingsResponse
from dineflow.application.use_cases.settings import GetSettings, UpdateSettings

router = APIRouter()


@router.get(
    "/v1/settings",
    response_model=SettingsResponse,
    dependencies=[Depends(require_any_role)],
)
def get_settings() -> SettingsResponse:
    return GetSettings(settings_repository=get_stores().settings).execute()


@router.put(
    "/v1/settings",
    response_model=SettingsResponse,
    dependencies=[Depends(require_owner)],
)
def update_settings(request_dto: UpdateSettingsRequest) -> SettingsResponse:
    return UpdateSettings(settings_repository=get_stores().settings).execute(request_dto)
