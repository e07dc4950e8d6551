from __future__ import annotations

import logging
import os
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

import saturday.models  # noqa: F401  registers every mapper before first query
from saturday.core.logging import RequestLoggingMiddleware, configure_logging
from saturday.core.observability import PrometheusMiddleware, metrics_endpoint
from saturday.core.settings import settings
from saturday.db.session import get_db
from saturday.router_registry import include_all_routers

configure_logging(level=settings.log_level)
logger = logging.getLogger(__name__)

build_time = os.getenv("BUILD_TIME") or datetime.now(timezone.utc).isoformat()

if settings.is_production and any(origin.strip() == "*" for origin in settings.allow_origins):
    raise RuntimeError("ALLOW_ORIGINS cannot include '*' in production")

app = FastAPI(title=settings.project_name, version=settings.project_version)

# Local dev servers pick arbitrary ports.
allow_origin_regex = None if settings.is_production else r"^http://(localhost|127\.0\.0\.1)(:\d+)?$"

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_origin_regex=allow_origin_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-Id", "Accept"],
)

# Observability middleware
app.add_middleware(PrometheusMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# Outermost, so scheme and client reflect X-Forwarded-* before anything reads them.
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=settings.trusted_proxy_hosts)

app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["observability"], include_in_schema=False)

include_all_routers(app)


@app.get("/healthz", tags=["health"])
def healthcheck(db: Session = Depends(get_db)) -> dict[str, str]:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Healthcheck failed", exc_info=True)
        raise HTTPException(status_code=503, detail="Service unavailable") from exc
    return {"status": "ok", "database": "ok"}


@app.get("/version", tags=["health"])
def version() -> dict[str, str | None]:
    return {
        "app": "saturday",
        "version": settings.build_version or settings.project_version,
        "git_sha": settings.git_sha,
        "build_time": build_time,
        "env": "prod" if settings.is_production else "dev",
    }
