from __future__ import annotations

from dataclasses import dataclass, field, replace

from dineflow.domain.common.ids import MenuItemId
from dineflow.domain.common.money import Money, zero
from dineflow.domain.menu.entities import MenuItem


@dataclass(frozen=True)
class CartLine:
    menu_item_id: MenuItemId
    name: str
    quantity: int
    unit_price: Money
    special_requests: str | None = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity)


@dataclass
class Cart:
    """Ephemeral basket owned by one customer or staff member until checkout.

    Unit prices are snapshotted when an item is added.
    """

    currency: str
    lines: list[CartLine] = field(default_factory=list)

    def add(
        self,
        item: MenuItem,
        quantity: int = 1,
        special_requests: str | None = None,
    ) -> CartLine:
        if not item.is_orderable:
            raise CartItemUnavailableError(f"menu item {item.item_id} is unavailable")
        if item.price_money.currency != self.currency:
            raise ValueError("menu item currency does not match the cart currency")
        if quantity < 1:
            raise ValueError("quantity must be >= 1")

        for index, line in enumerate(self.lines):
            if line.menu_item_id == item.item_id and line.special_requests == special_requests:
                merged = replace(line, quantity=line.quantity + quantity)
                self.lines[index] = merged
                return merged

        line = CartLine(
            menu_item_id=item.item_id,
            name=item.name,
            quantity=quantity,
            unit_price=item.price_money,
            special_requests=special_requests,
        )
        self.lines.append(line)
        return line

    @property
    def total(self) -> Money:
        amount = zero(self.currency)
        for line in self.lines:
            amount = amount.plus(line.line_total)
        return amount

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


class CartItemUnavailableError(Exception):
    pass
