from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from opentelemetry import trace
from sqlalchemy.engine import Engine

from dineflow.api.middleware.request_id import get_request_id
from dineflow.application.ports.cache import CacheStore
from dineflow.application.ports.payments import PaymentGateway
from dineflow.application.ports.publisher import EventPublisher
from dineflow.application.ports.repositories import (
    BillRepository,
    MenuRepository,
    OrderRepository,
    ReservationRepository,
    SettingsRepository,
    TableRepository,
    WaitlistRepository,
)
from dineflow.application.use_cases.context import TraceContext
from dineflow.infrastructure.cache.cache_store import RedisCacheStore
from dineflow.infrastructure.cache.redis_client import redis_configured
from dineflow.infrastructure.db.repositories.bill_repo import SqlAlchemyBillRepository
from dineflow.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository
from dineflow.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from dineflow.infrastructure.db.repositories.reservation_repo import SqlAlchemyReservationRepository
from dineflow.infrastructure.db.repositories.settings_repo import SqlAlchemySettingsRepository
from dineflow.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from dineflow.infrastructure.db.repositories.waitlist_repo import SqlAlchemyWaitlistRepository
from dineflow.infrastructure.db.session import get_engine
from dineflow.infrastructure.memory.repositories import (
    InMemoryBillRepository,
    InMemoryMenuRepository,
    InMemoryOrderRepository,
    InMemoryReservationRepository,
    InMemorySettingsRepository,
    InMemoryTableRepository,
    InMemoryWaitlistRepository,
)
from dineflow.infrastructure.messaging.redis_publisher import (
    LoggingEventPublisher,
    RedisEventPublisher,
)
from dineflow.infrastructure.payments.http_gateway import HttpPaymentGateway

DEFAULT_PUBLIC_BASE_URL = "http://localhost:3000"
DEFAULT_QR_IMAGE_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/"


@dataclass(frozen=True)
class Stores:
    menu: MenuRepository
    tables: TableRepository
    orders: OrderRepository
    bills: BillRepository
    waitlist: WaitlistRepository
    settings: SettingsRepository
    reservations: ReservationRepository
    engine: Engine | None = None


def store_backend() -> str:
    return os.getenv("STORE_BACKEND", "memory").lower()


@lru_cache(maxsize=1)
def get_stores() -> Stores:
    backend = store_backend()
    if backend == "memory":
        return Stores(
            menu=InMemoryMenuRepository(),
            tables=InMemoryTableRepository(),
            orders=InMemoryOrderRepository(),
            bills=InMemoryBillRepository(),
            waitlist=InMemoryWaitlistRepository(),
            settings=InMemorySettingsRepository(),
            reservations=InMemoryReservationRepository(),
        )
    if backend == "sql":
        engine = get_engine()
        return Stores(
            menu=SqlAlchemyMenuRepository(engine),
            tables=SqlAlchemyTableRepository(engine),
            orders=SqlAlchemyOrderRepository(engine),
            bills=SqlAlchemyBillRepository(engine),
            waitlist=SqlAlchemyWaitlistRepository(engine),
            settings=SqlAlchemySettingsRepository(engine),
            reservations=SqlAlchemyReservationRepository(engine),
            engine=engine,
        )
    raise RuntimeError(f"unsupported STORE_BACKEND={backend!r}")


def get_publisher() -> EventPublisher:
    if redis_configured():
        return RedisEventPublisher()
    return LoggingEventPublisher()


def get_cache() -> CacheStore | None:
    if redis_configured():
        return RedisCacheStore()
    return None


def menu_cache_ttl_seconds() -> int:
    return int(os.getenv("MENU_CACHE_TTL_SECONDS", "60"))


@lru_cache(maxsize=1)
def get_payment_gateway() -> PaymentGateway | None:
    url = os.getenv("PAYMENT_PROCESSOR_URL")
    if not url:
        return None
    return HttpPaymentGateway(
        base_url=url,
        api_key=os.getenv("PAYMENT_PROCESSOR_API_KEY"),
        timeout_seconds=float(os.getenv("PAYMENT_TIMEOUT_SECONDS", "5")),
    )


def public_base_url() -> str:
    return os.getenv("PUBLIC_BASE_URL", DEFAULT_PUBLIC_BASE_URL)


def qr_image_service_url() -> str:
    return os.getenv("QR_IMAGE_SERVICE_URL", DEFAULT_QR_IMAGE_SERVICE_URL)


def _current_trace_id() -> str | None:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format(span_context.trace_id, "032x")


def current_trace_context() -> TraceContext:
    return TraceContext(trace_id=_current_trace_id(), request_id=get_request_id())
