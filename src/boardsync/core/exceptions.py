"""Board error taxonomy and the handlers that render it.

Services raise ``BoardError`` subclasses; the API layer never builds error
responses by hand. Every rendered error carries the request correlation id.
"""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.boardsync.core.config import get_settings
from src.boardsync.core.logging import get_logger

logger = get_logger(__name__)


class BoardError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(BoardError):
    """Missing, malformed, expired or forged credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class Forbidden(BoardError):
    """Authenticated, but lacking the membership or ownership required."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFound(BoardError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ValidationFailed(BoardError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class Conflict(BoardError):
    """State conflict such as a duplicate membership or removing the owner."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Conflict"


def _error_response(status_code: int, detail: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "request_id": correlation_id.get(),
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(BoardError)
    async def board_error_handler(request: Request, exc: BoardError) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, jsonable_encoder(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
        )
        detail = str(exc) if get_settings().expose_error_details else "Internal server error"
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)
