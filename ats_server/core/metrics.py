"""Prometheus metrics for the application."""

import re
import time

from prometheus_client import Counter, Histogram, Info, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# --- Metrics ---

APP_INFO = Info("app", "ATS tracker server info")
APP_INFO.info({"version": "1.0.0", "name": "ats_tracker_server"})

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30],
)

GENERATIONS = Counter(
    "ai_generations_total",
    "AI generation requests by kind and outcome",
    ["kind", "status"],  # status: success | fail | cached
)

GATEWAY_ATTEMPTS = Counter(
    "ai_gateway_attempts_total",
    "Provider attempts made by the gateway, by outcome",
    ["provider", "outcome"],  # outcome: success | timeout | transient | non_retryable | configuration
)


# --- Middleware ---

# Artifact UUIDs and numeric ids are collapsed to {id} to keep cardinality low
_ID_SEGMENT = re.compile(r"/([0-9]+|[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})(?=/|$)")


def _normalize_path(path: str) -> str:
    """Replace ids in paths with {id} to avoid high cardinality."""
    return _ID_SEGMENT.sub("/{id}", path)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Collect HTTP request metrics for Prometheus."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = _normalize_path(request.url.path)

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        REQUEST_COUNT.labels(method=method, path=path, status=response.status_code).inc()
        REQUEST_DURATION.labels(method=method, path=path).observe(duration)

        return response


def metrics_response() -> Response:
    """Generate Prometheus /metrics response."""
    return Response(
        content=generate_latest(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
