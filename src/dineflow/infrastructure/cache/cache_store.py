from __future__ import annotations

from dineflow.application.ports.cache import CacheStore
from dineflow.infrastructure.cache.redis_client import RedisSettings, client_for


class RedisCacheStore(CacheStore):
    """String cache with every key namespaced under REDIS_KEY_PREFIX."""

    def __init__(self, timeout_seconds: float = 1.0, settings: RedisSettings | None = None) -> None:
        self._settings = settings or RedisSettings.from_env(timeout_seconds)

    def _key(self, key: str) -> str:
        return f"{self._settings.key_prefix}{key}"

    def get(self, key: str) -> str | None:
        value = client_for(self._settings).get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            self.delete(key)
            return
        client_for(self._settings).setex(self._key(key), ttl_seconds, value)

    def delete(self, key: str) -> None:
        client_for(self._settings).delete(self._key(key))
