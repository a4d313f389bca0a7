from __future__ import annotations

from dineflow.application.dto.responses import SettingsResponse
from dineflow.domain.settings.entities import RestaurantSettings


def to_settings_response(settings: RestaurantSettings) -> SettingsResponse:
    return SettingsResponse(
        restaurantName=settings.restaurant_name,
        openingTime=settings.opening_time,
        closingTime=settings.closing_time,
        taxRate=float(settings.tax_rate),
        serviceCharge=float(settings.service_charge),
        currency=settings.currency,
        timeZone=settings.time_zone,
    )
