from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dineflow.domain.common.ids import MenuItemId
from dineflow.domain.common.money import Money
from dineflow.domain.menu.entities import AvailabilityStatus, MenuItem, MenuItemUpdate

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def _item(**overrides) -> MenuItem:
    fields = dict(
        item_id=MenuItemId("itm_001"),
        name="Margherita",
        description=None,
        price_money=Money(amount_cents=1200, currency="USD"),
        category="mains",
        availability=AvailabilityStatus.AVAILABLE,
        prep_time_minutes=12,
    )
    fields.update(overrides)
    return MenuItem(**fields)


def test_menu_item_name_must_be_non_empty() -> None:
    with pytest.raises(ValueError):
        _item(name="   ")


def test_menu_item_price_must_be_positive() -> None:
    with pytest.raises(ValueError):
        _item(price_money=Money(amount_cents=0, currency="USD"))


def test_menu_item_prep_time_must_be_positive() -> None:
    with pytest.raises(ValueError):
        _item(prep_time_minutes=0)


def test_limited_items_are_still_orderable() -> None:
    assert _item(availability=AvailabilityStatus.LIMITED).is_orderable
    assert not _item(availability=AvailabilityStatus.UNAVAILABLE).is_orderable


def test_apply_only_touches_given_fields() -> None:
    updated = _item().apply(MenuItemUpdate(availability=AvailabilityStatus.LIMITED), NOW)

    assert updated.availability == AvailabilityStatus.LIMITED
    assert updated.name == "Margherita"
    assert updated.price_money.amount_cents == 1200
    assert updated.updated_at == NOW


def test_archive_makes_item_unorderable() -> None:
    archived = _item().archive(NOW)

    assert archived.is_archived
    assert archived.availability == AvailabilityStatus.UNAVAILABLE
    assert not archived.is_orderable
