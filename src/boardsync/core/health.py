"""Health, banner and metrics endpoints."""

import secrets
import time
from datetime import UTC, datetime
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text

from src.boardsync.core.config import get_settings
from src.boardsync.core.db import get_session
from src.boardsync.core.logging import get_logger

logger = get_logger(__name__)

_started_at = time.monotonic()


async def check_database() -> bool:
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        return False


def setup_health_endpoint(app: FastAPI) -> None:
    """Register ``/health`` and the ``/`` service banner."""

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, Any]:
        """Liveness with database state. Always 200; ``database`` tells the story."""
        settings = get_settings()
        connected = await check_database()
        return {
            "status": "ok",
            "message": f"{settings.app_name} API is running",
            "timestamp": datetime.now(UTC).isoformat(),
            "environment": settings.app_env,
            "database": "connected" if connected else "disconnected",
            "uptime": round(time.monotonic() - _started_at, 3),
        }

    @app.get("/", tags=["health"])
    async def banner() -> dict[str, Any]:
        return {
            "message": f"{get_settings().app_name} Project Management API",
            "version": app.version,
            "endpoints": {
                "health": "/health",
                "auth": "/api/auth",
                "projects": "/api/projects",
                "tasks": "/api/tasks",
                "comments": "/api/comments",
                "realtime": "/ws",
            },
        }


def setup_metrics(app: FastAPI) -> None:
    """Configure Prometheus metrics with optional API key protection."""
    settings = get_settings()
    instrumentator = Instrumentator(excluded_handlers=["/metrics", "/ws"]).instrument(app)

    if settings.metrics_api_key:
        api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

        async def verify_metrics_key(
            api_key: str | None = Depends(api_key_header),
        ) -> None:
            if (
                api_key is None
                or settings.metrics_api_key is None
                or not secrets.compare_digest(api_key, settings.metrics_api_key)
            ):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid or missing metrics API key",
                )

        instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
    else:
        instrumentator.expose(app, endpoint="/metrics")
