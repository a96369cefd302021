"""Credential bootstrap and verification."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.boardsync.core.exceptions import Conflict, Unauthenticated
from src.boardsync.core.logging import get_logger
from src.boardsync.core.security import create_access_token, user_id_from_token
from src.boardsync.models import User
from src.boardsync.models.base import utc_now
from src.boardsync.repositories import UserRepository
from src.boardsync.schemas.auth import SyncRequest

logger = get_logger(__name__)


class AuthService:
    """Turns identity-provider profiles into users and access tokens."""

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def sync_user(self, data: SyncRequest) -> tuple[str, User]:
        """Find or create the user for a provider identity and issue a token.

        An existing user's avatar is refreshed when the provider reports a
        different one.

        Raises:
            Conflict: The email already belongs to another provider identity.
        """
        user = await self.user_repo.get_by_provider_id(data.provider_id)

        try:
            if user is None:
                user = User(
                    provider_id=data.provider_id,
                    email=data.email,
                    name=data.name,
                    avatar=data.avatar or "",
                )
                self.user_repo.add(user)
                await self.session.commit()
                await self.session.refresh(user)
                logger.info("User created", user_id=str(user.id))
            elif data.avatar and user.avatar != data.avatar:
                user.avatar = data.avatar
                user.updated_at = utc_now()
                await self.session.commit()
                await self.session.refresh(user)
                logger.info("User avatar updated", user_id=str(user.id))
        except IntegrityError as e:
            await self.session.rollback()
            raise Conflict("Email is already registered to another account") from e
        except Exception:
            await self.session.rollback()
            raise

        return create_access_token(user.id), user

    async def authenticate(self, token: str | None) -> User:
        """Return the user an access token was issued for.

        Raises:
            Unauthenticated: Missing, malformed, expired or forged token, or
                the user no longer exists.
        """
        if not token:
            raise Unauthenticated("Missing authentication token")
        user_id = user_id_from_token(token)
        if user_id is None:
            raise Unauthenticated("Invalid or expired token")
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise Unauthenticated("User not found")
        return user
