from __future__ import annotations

from dineflow.application.dto.responses import MoneyResponse
from dineflow.domain.common.money import Money


def to_money_response(money: Money) -> MoneyResponse:
    return MoneyResponse(amountCents=money.amount_cents, currency=money.currency)
