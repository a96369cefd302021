"""Repository for User entity."""

from collections.abc import Iterable
from uuid import UUID

from sqlmodel import col, select

from src.boardsync.models import User
from src.boardsync.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_provider_id(self, provider_id: str) -> User | None:
        """Get user by the identity provider's id."""
        result = await self.session.execute(select(User).where(User.provider_id == provider_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_many(self, ids: Iterable[UUID]) -> dict[UUID, User]:
        """Load users by id, keyed by id. Unknown ids are skipped."""
        wanted = set(ids)
        if not wanted:
            return {}
        result = await self.session.execute(select(User).where(col(User.id).in_(wanted)))
        return {user.id: user for user in result.scalars().all()}
