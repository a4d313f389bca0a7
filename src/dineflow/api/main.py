from __future__ import annotations

import os

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dineflow.api.error_handling import register_exception_handlers
from dineflow.api.middleware.access_log import AccessLogMiddleware
from dineflow.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from dineflow.api.routes import (
    bills,
    cart,
    health,
    kitchen,
    menu,
    metrics,
    orders,
    printing,
    reservations,
    settings,
    stats,
    tables,
    waitlist,
)
from dineflow.infrastructure.observability.logging_config import configure_logging
from dineflow.infrastructure.observability.otel import configure_otel

ROUTERS: tuple[APIRouter, ...] = (
    health.router,
    metrics.router,
    menu.router,
    cart.router,
    tables.owner_router,
    tables.router,
    orders.router,
    kitchen.router,
    printing.router,
    bills.router,
    waitlist.router,
    reservations.router,
    stats.router,
    settings.router,
)

OPEN_CORS_ENVS = frozenset({"dev", "test"})


def cors_allow_origins() -> list[str]:
    """Any origin in dev/test; elsewhere CORS_ALLOW_ORIGINS, or the guest ordering site."""
    if os.getenv("APP_ENV", "dev").lower() in OPEN_CORS_ENVS:
        return ["*"]
    raw_value = os.getenv("CORS_ALLOW_ORIGINS") or os.getenv("PUBLIC_BASE_URL", "")
    return [origin.strip().rstrip("/") for origin in raw_value.split(",") if origin.strip()]


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Dineflow Backend",
        version=os.getenv("APP_VERSION", "0.1.0"),
        description="Floor, ordering, kitchen, billing, waitlist and reservation API for a single restaurant.",
    )
    register_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    # Starlette runs the last-added middleware first: CORS, then request id, then access log.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
