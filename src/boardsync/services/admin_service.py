"""Admin service - destructive maintenance operations (non-production only)."""

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.boardsync.core.config import get_settings
from src.boardsync.core.exceptions import Forbidden
from src.boardsync.core.logging import get_logger
from src.boardsync.models import Comment, Project, ProjectMember, Task, User
from src.boardsync.realtime import RoomManager

logger = get_logger(__name__)


class AdminService:
    def __init__(self, session: AsyncSession, rooms: RoomManager):
        self.session = session
        self.rooms = rooms

    async def reset(self) -> dict[str, int]:
        """Delete every comment, task, membership, project and user.

        Returns:
            Rows deleted per table.

        Raises:
            Forbidden: Running in production.
        """
        if get_settings().is_production:
            raise Forbidden("Reset is disabled in production")

        deleted: dict[str, int] = {}
        try:
            for name, model in (
                ("comments", Comment),
                ("tasks", Task),
                ("project_members", ProjectMember),
                ("projects", Project),
                ("users", User),
            ):
                result = await self.session.execute(delete(model))
                deleted[name] = result.rowcount or 0
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        for project_id in self.rooms.room_ids():
            self.rooms.evict(project_id)
        logger.warning("Database reset", **deleted)
        return deleted
