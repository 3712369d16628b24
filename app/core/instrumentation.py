"""Logo Optimizer – Instrumentation.

Structured logging setup and Prometheus metrics.
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator

import structlog
from fastapi import APIRouter, FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)

router = APIRouter(tags=["monitoring"])

REQUEST_COUNT = Counter(
    "logo_optimizer_http_requests_total",
    "Total HTTP requests by method, endpoint and status",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "logo_optimizer_http_request_duration_seconds",
    "HTTP request latency by method and endpoint",
    ["method", "endpoint"],
)

VARIANTS_GENERATED = Counter(
    "logo_variants_generated_total",
    "Logo variants produced, by variant id",
    ["variant"],
)

PIPELINE_FAILURES = Counter(
    "logo_pipeline_failures_total",
    "Logo pipeline failures by error type",
    ["error"],
)

PIPELINE_STAGE_DURATION = Histogram(
    "logo_pipeline_duration_seconds",
    "Duration of logo pipeline stages",
    ["stage"],
)


@router.get("/metrics")
def metrics():
    """Expose Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@contextmanager
def observe_stage(stage: str) -> Iterator[None]:
    """Record the wall-clock duration of a pipeline stage."""
    start = time.perf_counter()
    try:
        yield
    finally:
        PIPELINE_STAGE_DURATION.labels(stage=stage).observe(time.perf_counter() - start)


def setup_logging(log_level: str = "info") -> None:
    """Configure structlog for JSON output."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_instrumentation(app: FastAPI, log_level: str = "info") -> None:
    """Configure logging and attach the request metrics middleware."""
    setup_logging(log_level)

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        path = request.url.path

        try:
            response = await call_next(request)
            status = str(response.status_code)
        except Exception:
            status = "500"
            raise
        finally:
            duration = time.time() - start_time
            REQUEST_COUNT.labels(method=request.method, endpoint=path, status=status).inc()
            REQUEST_LATENCY.labels(method=request.method, endpoint=path).observe(duration)

        return response
