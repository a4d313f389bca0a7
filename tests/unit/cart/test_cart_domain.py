from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dineflow.domain.cart.entities import Cart, CartItemUnavailableError
from dineflow.domain.common.ids import MenuItemId
from dineflow.domain.common.money import Money
from dineflow.domain.menu.entities import AvailabilityStatus, MenuItem


def _item(item_id: str, cents: int, availability=AvailabilityStatus.AVAILABLE) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(item_id),
        name=item_id,
        description=None,
        price_money=Money(amount_cents=cents, currency="USD"),
        category="mains",
        availability=availability,
        prep_time_minutes=10,
    )


def test_adding_same_item_and_requests_merges_quantity() -> None:
    cart = Cart(currency="USD")
    burger = _item("itm_burger", 1000)

    cart.add(burger, quantity=1)
    cart.add(burger, quantity=2)
    cart.add(burger, quantity=1, special_requests="no pickles")

    assert [(line.quantity, line.special_requests) for line in cart.lines] == [(3, None), (1, "no pickles")]
    assert cart.item_count == 4
    assert cart.total.amount_cents == 4000


def test_unavailable_item_cannot_be_added() -> None:
    cart = Cart(currency="USD")

    with pytest.raises(CartItemUnavailableError):
        cart.add(_item("itm_soup", 600, AvailabilityStatus.UNAVAILABLE))


def test_item_priced_in_another_currency_is_refused() -> None:
    cart = Cart(currency="EUR")

    with pytest.raises(ValueError):
        cart.add(_item("itm_burger", 1000))
    assert cart.lines == []
