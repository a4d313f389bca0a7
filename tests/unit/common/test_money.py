from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dineflow.domain.common.money import Money, apply_rate, split_evenly


def test_money_invariants() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=-1, currency="USD")
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="usd")
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="US")


def test_plus_rejects_mixed_currencies() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="USD").plus(Money(amount_cents=100, currency="EUR"))


def test_apply_rate_rounds_half_up() -> None:
    assert apply_rate(Money(amount_cents=5, currency="USD"), Decimal("0.1")).amount_cents == 1
    assert apply_rate(Money(amount_cents=4, currency="USD"), Decimal("0.1")).amount_cents == 0
    assert apply_rate(Money(amount_cents=2000, currency="USD"), Decimal("0.08")).amount_cents == 160


def test_apply_rate_rejects_negative_rate() -> None:
    with pytest.raises(ValueError):
        apply_rate(Money(amount_cents=100, currency="USD"), Decimal("-0.01"))


def test_split_evenly_hands_remainder_to_first_shares() -> None:
    shares = split_evenly(Money(amount_cents=1000, currency="USD"), 3)

    assert [share.amount_cents for share in shares] == [334, 333, 333]
    assert sum(share.amount_cents for share in shares) == 1000
