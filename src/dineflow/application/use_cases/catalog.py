from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from dineflow.application.dto.requests import CreateMenuItemRequest, UpdateMenuItemRequest
from dineflow.application.dto.responses import MenuItemListResponse, MenuItemResponse
from dineflow.application.mappers.menu_mapper import (
    to_menu_item_list_response,
    to_menu_item_response,
)
from dineflow.application.ports.cache import CacheStore
from dineflow.application.ports.repositories import MenuRepository, SettingsRepository
from dineflow.application.use_cases.settings import current_settings
from dineflow.domain.common.ids import MenuItemId
from dineflow.domain.common.money import Money
from dineflow.domain.menu.entities import AvailabilityStatus, MenuItem, MenuItemUpdate

MENU_CACHE_KEY = "menu:items"


class MenuItemNotFoundError(Exception):
    pass


class InvalidMenuItemError(Exception):
    pass


def price_to_money(price: Decimal, currency: str) -> Money:
    return Money(amount_cents=int((price * 100).to_integral_value()), currency=currency)


class _MenuCache:
    def __init__(self, cache: CacheStore | None, ttl_seconds: int) -> None:
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    def get(self) -> MenuItemListResponse | None:
        if self._cache is None:
            return None
        try:
            payload = self._cache.get(MENU_CACHE_KEY)
        except Exception:
            return None
        if not payload:
            return None
        try:
            return MenuItemListResponse.model_validate_json(payload)
        except ValidationError:
            return None

    def set(self, response: MenuItemListResponse) -> None:
        if self._cache is None:
            return
        try:
            self._cache.set(MENU_CACHE_KEY, response.model_dump_json(), ttl_seconds=self._ttl_seconds)
        except Exception:
            return

    def invalidate(self) -> None:
        if self._cache is None:
            return
        try:
            self._cache.delete(MENU_CACHE_KEY)
        except Exception:
            return


class ListMenuItems:
    def __init__(
        self,
        menu_repository: MenuRepository,
        cache: CacheStore | None = None,
        ttl_seconds: int = 60,
    ) -> None:
        self._menu_repository = menu_repository
        self._cache = _MenuCache(cache, ttl_seconds)

    def execute(
        self,
        category: str | None = None,
        include_unavailable: bool = True,
    ) -> MenuItemListResponse:
        response = self._cache.get()
        if response is None:
            items = [item for item in self._menu_repository.list_items() if not item.is_archived]
            items.sort(key=lambda item: (item.category, item.name))
            response = to_menu_item_list_response(items)
            self._cache.set(response)

        selected = response.items
        if category is not None:
            selected = [item for item in selected if item.category == category]
        if not include_unavailable:
            selected = [
                item
                for item in selected
                if item.availabilityStatus != AvailabilityStatus.UNAVAILABLE.value
            ]
        return MenuItemListResponse(items=selected)


class GetMenuItem:
    def __init__(self, menu_repository: MenuRepository) -> None:
        self._menu_repository = menu_repository

    def execute(self, item_id: MenuItemId) -> MenuItemResponse:
        item = self._menu_repository.get(item_id)
        if item is None or item.is_archived:
            raise MenuItemNotFoundError(f"menu item not found for item_id={item_id}")
        return to_menu_item_response(item)


class CreateMenuItem:
    def __init__(
        self,
        menu_repository: MenuRepository,
        settings_repository: SettingsRepository,
        cache: CacheStore | None = None,
    ) -> None:
        self._menu_repository = menu_repository
        self._settings_repository = settings_repository
        self._cache = _MenuCache(cache, 0)

    def execute(self, request_dto: CreateMenuItemRequest) -> MenuItemResponse:
        currency = current_settings(self._settings_repository).currency
        try:
            item = MenuItem(
                item_id=MenuItemId(f"itm_{uuid4().hex[:12]}"),
                name=request_dto.name,
                description=request_dto.description,
                price_money=price_to_money(request_dto.price, currency),
                category=request_dto.category,
                availability=request_dto.availability_status,
                prep_time_minutes=request_dto.prep_time_minutes,
                updated_at=datetime.now(timezone.utc),
            )
        except ValueError as exc:
            raise InvalidMenuItemError(str(exc)) from exc

        self._menu_repository.save(item)
        self._cache.invalidate()
        return to_menu_item_response(item)


class UpdateMenuItem:
    def __init__(
        self,
        menu_repository: MenuRepository,
        cache: CacheStore | None = None,
    ) -> None:
        self._menu_repository = menu_repository
        self._cache = _MenuCache(cache, 0)

    def execute(self, item_id: MenuItemId, request_dto: UpdateMenuItemRequest) -> MenuItemResponse:
        item = self._menu_repository.get(item_id)
        if item is None or item.is_archived:
            raise MenuItemNotFoundError(f"menu item not found for item_id={item_id}")

        price_money = None
        if request_dto.price is not None:
            price_money = price_to_money(request_dto.price, item.price_money.currency)
        update = MenuItemUpdate(
            name=request_dto.name,
            description=request_dto.description,
            price_money=price_money,
            category=request_dto.category,
            availability=request_dto.availability_status,
            prep_time_minutes=request_dto.prep_time_minutes,
        )
        try:
            updated = item.apply(update, datetime.now(timezone.utc))
        except ValueError as exc:
            raise InvalidMenuItemError(str(exc)) from exc

        self._menu_repository.save(updated)
        self._cache.invalidate()
        return to_menu_item_response(updated)


class ArchiveMenuItem:
    """Soft-deletes a menu item so historical order lines keep their reference."""

    def __init__(
        self,
        menu_repository: MenuRepository,
        cache: CacheStore | None = None,
    ) -> None:
        self._menu_repository = menu_repository
        self._cache = _MenuCache(cache, 0)

    def execute(self, item_id: MenuItemId) -> None:
        item = self._menu_repository.get(item_id)
        if item is None or item.is_archived:
            raise MenuItemNotFoundError(f"menu item not found for item_id={item_id}")
        self._menu_repository.save(item.archive(datetime.now(timezone.utc)))
        self._cache.invalidate()
