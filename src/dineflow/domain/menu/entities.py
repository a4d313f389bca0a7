from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from dineflow.domain.common.ids import MenuItemId
from dineflow.domain.common.money import Money


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    LIMITED = "limited"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    name: str
    description: str | None
    price_money: Money
    category: str
    availability: AvailabilityStatus
    prep_time_minutes: int
    popularity_score: int = 0
    is_archived: bool = False
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if not self.category.strip():
            raise ValueError("category must be non-empty")
        if self.price_money.amount_cents <= 0:
            raise ValueError("price must be > 0")
        if self.prep_time_minutes <= 0:
            raise ValueError("prep_time_minutes must be > 0")

    @property
    def is_orderable(self) -> bool:
        return not self.is_archived and self.availability != AvailabilityStatus.UNAVAILABLE

    def apply(self, update: MenuItemUpdate, now: datetime) -> MenuItem:
        changes: dict[str, object] = {"updated_at": now}
        if update.name is not None:
            changes["name"] = update.name
        if update.description is not None:
            changes["description"] = update.description
        if update.price_money is not None:
            changes["price_money"] = update.price_money
        if update.category is not None:
            changes["category"] = update.category
        if update.availability is not None:
            changes["availability"] = update.availability
        if update.prep_time_minutes is not None:
            changes["prep_time_minutes"] = update.prep_time_minutes
        return replace(self, **changes)

    def archive(self, now: datetime) -> MenuItem:
        return replace(
            self,
            is_archived=True,
            availability=AvailabilityStatus.UNAVAILABLE,
            updated_at=now,
        )


@dataclass(frozen=True)
class MenuItemUpdate:
    """Fields staff may change on a menu item. ``None`` leaves a field untouched."""

    name: str | None = None
    description: str | None = None
    price_money: Money | None = None
    category: str | None = None
    availability: AvailabilityStatus | None = None
    prep_time_minutes: int | None = None
