from __future__ import annotations

import logging
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("dineflow.api.access")

HTTP_REQUESTS_TOTAL = Counter(
    "dineflow_http_requests_total",
    "HTTP requests handled, by route template.",
    ["method", "route", "status_code"],
)
HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "dineflow_http_request_duration_seconds",
    "HTTP request duration in seconds, by route template.",
    ["method", "route"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

UNMATCHED_ROUTE = "<unmatched>"


def _route_template(request: Request) -> str:
    # raw paths carry table, order and bill ids; label by template instead
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


def _record(request: Request, status_code: int, started: float) -> dict[str, object]:
    elapsed = time.perf_counter() - started
    route = _route_template(request)
    HTTP_REQUESTS_TOTAL.labels(request.method, route, str(status_code)).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(request.method, route).observe(elapsed)
    return {
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "duration_ms": round(elapsed * 1000, 2),
    }


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request_error", extra=_record(request, 500, started))
            raise

        fields = _record(request, response.status_code, started)
        if response.status_code >= 500:
            logger.error("request_complete", extra=fields)
        else:
            logger.info("request_complete", extra=fields)
        return response
