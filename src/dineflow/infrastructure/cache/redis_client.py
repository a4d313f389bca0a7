from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "dineflow:"


@dataclass(frozen=True)
class RedisSettings:
    url: str
    key_prefix: str = DEFAULT_KEY_PREFIX
    timeout_seconds: float = 1.0

    @classmethod
    def from_env(cls, timeout_seconds: float = 1.0) -> RedisSettings:
        url = os.getenv("REDIS_URL")
        if not url:
            raise RuntimeError("REDIS_URL is not set")
        return cls(
            url=url,
            key_prefix=os.getenv("REDIS_KEY_PREFIX", DEFAULT_KEY_PREFIX),
            timeout_seconds=timeout_seconds,
        )


def redis_configured() -> bool:
    return bool(os.getenv("REDIS_URL"))


@lru_cache(maxsize=8)
def client_for(settings: RedisSettings) -> redis.Redis:
    # one pool per url/timeout pair, shared by the cache store and publisher
    return redis.Redis.from_url(
        settings.url,
        socket_connect_timeout=settings.timeout_seconds,
        socket_timeout=settings.timeout_seconds,
        decode_responses=True,
    )


def get_redis_client(timeout_seconds: float = 1.0) -> redis.Redis:
    return client_for(RedisSettings.from_env(timeout_seconds))


def ping_redis(timeout_seconds: float = 1.0) -> bool:
    try:
        return bool(get_redis_client(timeout_seconds).ping())
    except (redis.RedisError, RuntimeError):
        logger.warning("redis_ping_failed", exc_info=True)
        return False
