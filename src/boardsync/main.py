from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.boardsync.api.middlewares import setup_middlewares
from src.boardsync.api.v1.router import api_router, ws_router
from src.boardsync.core.config import get_settings
from src.boardsync.core.db import dispose_engine
from src.boardsync.core.exceptions import setup_exception_handlers
from src.boardsync.core.health import setup_health_endpoint, setup_metrics
from src.boardsync.core.logging import get_logger, setup_logging
from src.boardsync.realtime import RoomManager

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting service", app_name=settings.app_name, environment=settings.app_env)

    yield

    logger.info("Shutting down", open_connections=app.state.rooms.connection_count)
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Identity-provider sync and access tokens"},
    {"name": "projects", "description": "Projects and membership"},
    {"name": "tasks", "description": "Board tasks"},
    {"name": "comments", "description": "Task comments"},
    {"name": "admin", "description": "Maintenance endpoints (disabled in production)"},
    {"name": "health", "description": "Liveness and service banner"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Collaborative Kanban boards with realtime sync",
        version="1.0.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )
    app.state.rooms = RoomManager(send_timeout=settings.ws_send_timeout_seconds)

    setup_exception_handlers(app)
    setup_middlewares(app, settings)

    app.include_router(api_router)
    app.include_router(ws_router)

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
