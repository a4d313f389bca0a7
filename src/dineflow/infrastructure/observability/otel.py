from __future__ import annotations

import logging
import os
from functools import lru_cache

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

logger = logging.getLogger(__name__)

# Probe and scrape paths are not traced.
UNTRACED_URLS = "health/live,health/ready,metrics"


@lru_cache(maxsize=1)
def _tracer_provider() -> TracerProvider:
    provider = TracerProvider(
        resource=Resource.create(
            {
                SERVICE_NAME: os.getenv("OTEL_SERVICE_NAME", "dineflow-backend"),
                SERVICE_VERSION: os.getenv("APP_VERSION", "0.1.0"),
                "deployment.environment": os.getenv("APP_ENV", "dev"),
            }
        )
    )
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        try:
            exporter = OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
        except Exception:
            logger.exception("otel_exporter_setup_failed")
        else:
            provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())
    return provider


def configure_otel(app: FastAPI) -> None:
    """Instruments the app; the tracer provider is process-wide and built once."""
    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=_tracer_provider(),
        excluded_urls=UNTRACED_URLS,
    )
