from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from dineflow.api.auth import require_owner, require_staff
from dineflow.api.dependencies import get_cache, get_stores, menu_cache_ttl_seconds
from dineflow.application.dto.requests import CreateMenuItemRequest, UpdateMenuItemRequest
from dineflow.application.dto.responses import MenuItemListResponse, MenuItemResponse
from dineflow.application.use_cases.catalog import (
    ArchiveMenuItem,
    CreateMenuItem,
    GetMenuItem,
    ListMenuItems,
    UpdateMenuItem,
)
from dineflow.domain.common.ids import MenuItemId

router = APIRouter()


def _list_menu_items_use_case() -> ListMenuItems:
    return ListMenuItems(
        menu_repository=get_stores().menu,
        cache=get_cache(),
        ttl_seconds=menu_cache_ttl_seconds(),
    )


@router.get("/v1/menu-items", response_model=MenuItemListResponse)
def list_menu_items(
    category: str | None = None,
    include_unavailable: bool = Query(default=True, alias="includeUnavailable"),
) -> MenuItemListResponse:
    return _list_menu_items_use_case().execute(
        category=category,
        include_unavailable=include_unavailable,
    )


@router.get("/v1/menu-items/{item_id}", response_model=MenuItemResponse)
def get_menu_item(item_id: str) -> MenuItemResponse:
    return GetMenuItem(menu_repository=get_stores().menu).execute(MenuItemId(item_id))


@router.post(
    "/v1/menu-items",
    response_model=MenuItemResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_owner)],
)
def create_menu_item(request_dto: CreateMenuItemRequest) -> MenuItemResponse:
    stores = get_stores()
    use_case = CreateMenuItem(
        menu_repository=stores.menu,
        settings_repository=stores.settings,
        cache=get_cache(),
    )
    return use_case.execute(request_dto)


@router.put(
    "/v1/menu-items/{item_id}",
    response_model=MenuItemResponse,
    dependencies=[Depends(require_staff)],
)
def update_menu_item(item_id: str, request_dto: UpdateMenuItemRequest) -> MenuItemResponse:
    use_case = UpdateMenuItem(menu_repository=get_stores().menu, cache=get_cache())
    return use_case.execute(MenuItemId(item_id), request_dto)


@router.delete(
    "/v1/menu-items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_owner)],
)
def archive_menu_item(item_id: str) -> Response:
    ArchiveMenuItem(menu_repository=get_stores().menu, cache=get_cache()).execute(
        MenuItemId(item_id)
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
