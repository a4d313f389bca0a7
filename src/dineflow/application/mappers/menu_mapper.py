from __future__ import annotations

from dineflow.application.dto.responses import MenuItemListResponse, MenuItemResponse
from dineflow.application.mappers.money_mapper import to_money_response
from dineflow.domain.menu.entities import MenuItem


def to_menu_item_response(item: MenuItem) -> MenuItemResponse:
    return MenuItemResponse(
        itemId=str(item.item_id),
        name=item.name,
        description=item.description,
        price=to_money_response(item.price_money),
        category=item.category,
        availabilityStatus=item.availability.value,
        prepTimeMinutes=item.prep_time_minutes,
        popularityScore=item.popularity_score,
    )


def to_menu_item_list_response(items: list[MenuItem]) -> MenuItemListResponse:
    return MenuItemListResponse(items=[to_menu_item_response(item) for item in items])
