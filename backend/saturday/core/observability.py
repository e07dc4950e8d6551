"""
Prometheus instrumentation for the Saturday API.

This module sets up:
- Prometheus metrics endpoint
- Request/exception counters and a latency histogram
"""

from __future__ import annotations

import re
import time

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

http_requests_total = Counter(
    "http_server_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"]
)

http_request_duration_seconds = Histogram(
    "http_server_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

http_exceptions_total = Counter(
    "http_server_exceptions_total",
    "Total unhandled exceptions",
    ["method", "path", "exception_type"]
)

availability_mutations_total = Counter(
    "saturday_availability_mutations_total",
    "Availability upserts and deletes accepted by the API",
    ["operation"]
)

_DATE_SEGMENT = re.compile(r"/\d{4}-\d{2}-\d{2}")
_NUMERIC_SEGMENT = re.compile(r"/\d+")


def normalize_path(path: str) -> str:
    """Replace dates and numeric IDs in path with placeholders to reduce cardinality."""
    normalized = _DATE_SEGMENT.sub("/{date}", path)
    normalized = _NUMERIC_SEGMENT.sub("/{id}", normalized)
    parts = normalized.split("/")[:5]
    return "/".join(parts)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for all requests."""

    async def dispatch(self, request: Request, call_next) -> Response:
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            http_exceptions_total.labels(
                method=method,
                path=path,
                exception_type=type(e).__name__
            ).inc()
            http_requests_total.labels(method=method, path=path, status=500).inc()
            http_request_duration_seconds.labels(method=method, path=path).observe(duration)
            raise

        duration = time.perf_counter() - start_time
        http_requests_total.labels(
            method=method,
            path=path,
            status=response.status_code
        ).inc()
        http_request_duration_seconds.labels(
            method=method,
            path=path
        ).observe(duration)
        return response


async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics endpoint handler."""
    return PlainTextResponse(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
