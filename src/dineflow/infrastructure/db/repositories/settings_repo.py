from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Engine

from dineflow.application.ports.repositories import SettingsRepository
from dineflow.domain.settings.entities import RestaurantSettings
from dineflow.infrastructure.db.models.settings import SETTINGS_ROW_ID, RestaurantSettingsModel
from dineflow.infrastructure.db.session import get_engine, store_session


class SqlAlchemySettingsRepository(SettingsRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self) -> RestaurantSettings | None:
        with store_session(self._engine) as session:
            model = session.get(RestaurantSettingsModel, SETTINGS_ROW_ID)
            if model is None:
                return None
            return RestaurantSettings(
                restaurant_name=model.restaurant_name,
                opening_time=model.opening_time,
                closing_time=model.closing_time,
                tax_rate=Decimal(model.tax_rate),
                service_charge=Decimal(model.service_charge),
                currency=model.currency,
                time_zone=model.time_zone,
            )

    def save(self, settings: RestaurantSettings) -> None:
        model = RestaurantSettingsModel(
            id=SETTINGS_ROW_ID,
            restaurant_name=settings.restaurant_name,
            opening_time=settings.opening_time,
            closing_time=settings.closing_time,
            tax_rate=settings.tax_rate,
            service_charge=settings.service_charge,
            currency=settings.currency,
            time_zone=settings.time_zone,
        )
        with store_session(self._engine) as session:
            session.merge(model)
            session.commit()
