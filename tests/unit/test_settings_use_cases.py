from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from dineflow.application.dto.requests import UpdateSettingsRequest
from dineflow.application.use_cases.settings import GetSettings, InvalidSettingsError, UpdateSettings
from dineflow.infrastructure.memory.repositories import InMemorySettingsRepository


def test_defaults_are_served_before_anything_is_saved() -> None:
    settings = GetSettings(InMemorySettingsRepository()).execute()

    assert settings.taxRate == 0.08
    assert settings.currency == "USD"


def test_partial_update_keeps_other_fields() -> None:
    repository = InMemorySettingsRepository()

    updated = UpdateSettings(repository).execute(
        UpdateSettingsRequest(restaurant_name="Casa Nova", tax_rate=Decimal("0.07"))
    )

    assert updated.restaurantName == "Casa Nova"
    assert updated.taxRate == 0.07
    assert updated.closingTime == "22:00"
    assert GetSettings(repository).execute().restaurantName == "Casa Nova"


def test_invalid_currency_is_rejected() -> None:
    repository = InMemorySettingsRepository()

    with pytest.raises(InvalidSettingsError):
        UpdateSettings(repository).execute(UpdateSettingsRequest(currency="usd"))

    assert repository.get() is None


def test_unknown_time_zone_is_rejected() -> None:
    repository = InMemorySettingsRepository()

    with pytest.raises(InvalidSettingsError):
        UpdateSettings(repository).execute(UpdateSettingsRequest(time_zone="Mars/Olympus_Mons"))

    assert repository.get() is None
