from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


@dataclass(frozen=True)
class Money:
    amount_cents: int
    currency: str

    def __post_init__(self) -> None:
        if self.amount_cents < 0:
            raise ValueError("amount_cents must be >= 0")
        if len(self.currency) != 3 or not self.currency.isalpha() or not self.currency.isupper():
            raise ValueError("currency must be a 3-letter uppercase code")

    def plus(self, other: Money) -> Money:
        if other.currency != self.currency:
            raise ValueError("cannot add amounts in different currencies")
        return Money(amount_cents=self.amount_cents + other.amount_cents, currency=self.currency)

    def times(self, quantity: int) -> Money:
        return Money(amount_cents=self.amount_cents * quantity, currency=self.currency)


def zero(currency: str) -> Money:
    return Money(amount_cents=0, currency=currency)


def apply_rate(amount: Money, rate: Decimal) -> Money:
    """Return ``amount * rate`` rounded half-up to the cent."""
    if rate < 0:
        raise ValueError("rate must be >= 0")
    cents = (Decimal(amount.amount_cents) * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return Money(amount_cents=int(cents), currency=amount.currency)


def split_evenly(amount: Money, ways: int) -> list[Money]:
    if ways < 1:
        raise ValueError("ways must be >= 1")
    base, remainder = divmod(amount.amount_cents, ways)
    return [
        Money(amount_cents=base + (1 if index < remainder else 0), currency=amount.currency)
        for index in range(ways)
    ]
