from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from dineflow.application.ports.repositories import StoreUnavailableError

logger = logging.getLogger(__name__)


def configured_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is required when STORE_BACKEND=sql")
    return url


def _connect_args(database_url: str, connect_timeout: int) -> dict[str, object]:
    backend = make_url(database_url).get_backend_name()
    if backend == "postgresql":
        return {"connect_timeout": connect_timeout}
    if backend == "sqlite":
        # request handlers run in a threadpool
        return {"check_same_thread": False}
    return {}


@lru_cache(maxsize=8)
def _build_engine(database_url: str, connect_timeout: int) -> Engine:
    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=_connect_args(database_url, connect_timeout),
    )


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    return _build_engine(configured_database_url(), max(1, int(timeout_seconds)))


def ping_database(engine: Engine | None = None, timeout_seconds: float = 1.0) -> bool:
    try:
        with (engine or get_engine(timeout_seconds)).connect() as connection:
            connection.execute(text("SELECT 1"))
    except (SQLAlchemyError, RuntimeError):
        logger.warning("database_ping_failed", exc_info=True)
        return False
    return True


@contextmanager
def store_session(engine: Engine) -> Iterator[Session]:
    try:
        with Session(engine) as session:
            yield session
    except OperationalError as exc:
        raise StoreUnavailableError(str(exc)) from exc


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo on the way back; values are always written in UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
