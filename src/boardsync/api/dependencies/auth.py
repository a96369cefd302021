"""Authentication dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from src.boardsync.api.dependencies.services import AuthServiceDep
from src.boardsync.core.config import get_settings
from src.boardsync.core.logging import bind_user_context
from src.boardsync.models import User


def extract_token(request: Request) -> str | None:
    """Read the access token from the configured header or ``Authorization: Bearer``."""
    token = request.headers.get(get_settings().auth_header_name)
    if token:
        return token.strip()
    authorization = request.headers.get("authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization[7:].strip()
    return None


async def get_current_user(request: Request, auth_service: AuthServiceDep) -> User:
    """Resolve the caller from their access token.

    Raises:
        Unauthenticated: No token, a bad token, or the user no longer exists.
    """
    user = await auth_service.authenticate(extract_token(request))
    bind_user_context(user.id)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
