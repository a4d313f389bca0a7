from __future__ import annotations

import logging

import httpx

from dineflow.application.ports.payments import (
    PaymentGateway,
    PaymentProcessorUnavailableError,
    PaymentResult,
)
from dineflow.domain.common.money import Money

logger = logging.getLogger(__name__)


class HttpPaymentGateway(PaymentGateway):
    """Charges bills through an external payment processor's REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout_seconds: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = client or httpx.Client(timeout=timeout_seconds)
        self._url = f"{base_url.rstrip('/')}/charges"
        self._headers = headers

    def charge(self, amount: Money, reference: str) -> PaymentResult:
        payload = {
            "amountCents": amount.amount_cents,
            "currency": amount.currency,
            "reference": reference,
        }
        try:
            response = self._client.post(self._url, json=payload, headers=self._headers)
        except httpx.HTTPError as exc:
            logger.warning("payment_request_failed", extra={"reason": str(exc)})
            raise PaymentProcessorUnavailableError("payment processor is unreachable") from exc

        if response.status_code >= 500:
            logger.warning("payment_processor_error", extra={"status_code": response.status_code})
            raise PaymentProcessorUnavailableError(
                f"payment processor returned {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_success and body.get("status") == "succeeded":
            return PaymentResult(succeeded=True, processor_reference=str(body.get("id")))

        reason = body.get("message") or body.get("status") or f"status {response.status_code}"
        return PaymentResult(
            succeeded=False,
            processor_reference=str(body["id"]) if body.get("id") else None,
            failure_reason=str(reason),
        )
