from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass(frozen=True)
class RestaurantSettings:
    restaurant_name: str = "dineflow"
    opening_time: str = "09:00"
    closing_time: str = "22:00"
    tax_rate: Decimal = Decimal("0.08")
    service_charge: Decimal = Decimal("0.10")
    currency: str = "USD"
    time_zone: str = "America/New_York"

    def __post_init__(self) -> None:
        if not self.restaurant_name.strip():
            raise ValueError("restaurant_name must be non-empty")
        if self.tax_rate < 0 or self.tax_rate >= 1:
            raise ValueError("tax_rate must be in [0, 1)")
        if self.service_charge < 0 or self.service_charge >= 1:
            raise ValueError("service_charge must be in [0, 1)")
        if len(self.currency) != 3 or not self.currency.isalpha() or not self.currency.isupper():
            raise ValueError("currency must be a 3-letter uppercase code")
        try:
            ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown time_zone {self.time_zone!r}") from exc

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.time_zone)
