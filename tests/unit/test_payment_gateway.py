from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from dineflow.application.ports.payments import PaymentProcessorUnavailableError
from dineflow.domain.common.money import Money
from dineflow.infrastructure.payments.http_gateway import HttpPaymentGateway

AMOUNT = Money(amount_cents=3240, currency="USD")


def _gateway(handler) -> HttpPaymentGateway:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpPaymentGateway("https://pay.example.com/v1/", api_key="sk_test", client=client)


def test_successful_charge_returns_processor_reference() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "ch_123", "status": "succeeded"})

    result = _gateway(handler).charge(AMOUNT, reference="bil_1")

    assert result.succeeded
    assert result.processor_reference == "ch_123"
    assert str(seen[0].url) == "https://pay.example.com/v1/charges"
    assert seen[0].headers["Authorization"] == "Bearer sk_test"
    assert json.loads(seen[0].content) == {"amountCents": 3240, "currency": "USD", "reference": "bil_1"}


def test_declined_charge_carries_reason() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"id": "ch_9", "status": "failed", "message": "card_declined"})

    result = _gateway(handler).charge(AMOUNT, reference="bil_1")

    assert not result.succeeded
    assert result.failure_reason == "card_declined"
    assert result.processor_reference == "ch_9"


def test_non_json_rejection_uses_status_code() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="bad request")

    result = _gateway(handler).charge(AMOUNT, reference="bil_1")

    assert not result.succeeded
    assert result.failure_reason == "status 400"


def test_processor_outage_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"message": "maintenance"})

    with pytest.raises(PaymentProcessorUnavailableError):
        _gateway(handler).charge(AMOUNT, reference="bil_1")


def test_transport_error_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PaymentProcessorUnavailableError):
        _gateway(handler).charge(AMOUNT, reference="bil_1")
