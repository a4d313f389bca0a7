from __future__ import annotations

from dataclasses import replace

from dineflow.application.dto.requests import UpdateSettingsRequest
from dineflow.application.dto.responses import SettingsResponse
from dineflow.application.mappers.settings_mapper import to_settings_response
from dineflow.application.ports.repositories import SettingsRepository
from dineflow.domain.settings.entities import RestaurantSettings


class InvalidSettingsError(Exception):
    pass


def current_settings(settings_repository: SettingsRepository) -> RestaurantSettings:
    return settings_repository.get() or RestaurantSettings()


class GetSettings:
    def __init__(self, settings_repository: SettingsRepository) -> None:
        self._settings_repository = settings_repository

    def execute(self) -> SettingsResponse:
        return to_settings_response(current_settings(self._settings_repository))


class UpdateSettings:
    def __init__(self, settings_repository: SettingsRepository) -> None:
        self._settings_repository = settings_repository

    def execute(self, request_dto: UpdateSettingsRequest) -> SettingsResponse:
        settings = current_settings(self._settings_repository)
        changes = request_dto.model_dump(exclude_none=True)
        try:
            updated = replace(settings, **changes)
        except ValueError as exc:
            raise InvalidSettingsError(str(exc)) from exc
        self._settings_repository.save(updated)
        return to_settings_response(updated)
