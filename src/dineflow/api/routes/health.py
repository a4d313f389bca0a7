from __future__ import annotations

from fastapi import APIRouter, Response, status

from dineflow.api.dependencies import get_stores
from dineflow.infrastructure.cache.redis_client import ping_redis, redis_configured
from dineflow.infrastructure.db.session import ping_database

router = APIRouter()


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response) -> dict[str, object]:
    checks: dict[str, bool] = {}
    engine = get_stores().engine
    if engine is not None:
        checks["database"] = ping_database(engine, timeout_seconds=1.0)
    if redis_configured():
        checks["redis"] = ping_redis(timeout_seconds=1.0)

    if all(checks.values()):
        return {"status": "ok", "checks": checks}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "unavailable", "checks": checks}
