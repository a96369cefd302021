"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.boardsync.core.config import Settings

from .logging_context import logging_context_middleware

__all__ = ["logging_context_middleware", "setup_middlewares"]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Configure all application middlewares.

    Middleware order matters - the last one added runs first. HTTP middlewares
    do not wrap the ``/ws`` endpoint; it binds its own log context.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "X-Request-ID",
            settings.auth_header_name,
        ],
    )

    @app.middleware("http")
    async def _logging_context(request, call_next):  # type: ignore[no-untyped-def]
        return await logging_context_middleware(request, call_next)

    # Outermost, so the id exists before logging context is bound.
    app.add_middleware(CorrelationIdMiddleware)
