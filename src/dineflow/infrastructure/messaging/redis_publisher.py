from __future__ import annotations

import logging

from dineflow.application.ports.publisher import EventPublisher
from dineflow.infrastructure.cache.redis_client import RedisSettings, client_for

logger = logging.getLogger(__name__)


class RedisEventPublisher(EventPublisher):
    """Fans events out over Redis pub/sub to floor and kitchen displays."""

    def __init__(self, timeout_seconds: float = 1.0, settings: RedisSettings | None = None) -> None:
        self._settings = settings or RedisSettings.from_env(timeout_seconds)

    def publish(self, channel: str, message: str) -> None:
        receivers = client_for(self._settings).publish(channel, message)
        logger.debug("event_published", extra={"channel": channel, "receivers": receivers})


class LoggingEventPublisher(EventPublisher):
    """Used when no Redis is configured; clients fall back to polling."""

    def publish(self, channel: str, message: str) -> None:
        logger.debug("event_logged", extra={"channel": channel, "event": message})
