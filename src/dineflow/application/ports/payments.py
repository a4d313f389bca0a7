from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from dineflow.domain.common.money import Money


@dataclass(frozen=True)
class PaymentResult:
    succeeded: bool
    processor_reference: str | None
    failure_reason: str | None = None


class PaymentGateway(Protocol):
    def charge(self, amount: Money, reference: str) -> PaymentResult: ...


class PaymentProcessorUnavailableError(Exception):
    pass
