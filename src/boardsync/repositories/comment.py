"""Repository for Comment entity."""

from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import col, select

from src.boardsync.models import Comment
from src.boardsync.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    model = Comment

    async def list_by_task(self, task_id: UUID) -> list[Comment]:
        """Comments on a task, newest first."""
        result = await self.session.execute(
            select(Comment)
            .where(Comment.task_id == task_id)
            .order_by(col(Comment.created_at).desc())
        )
        return list(result.scalars().all())

    async def count_by_task(self, task_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Comment).where(Comment.task_id == task_id)
        )
        return result.scalar_one()

    async def delete_by_tasks(self, task_ids: list[UUID]) -> int:
        if not task_ids:
            return 0
        result = await self.session.execute(
            delete(Comment).where(col(Comment.task_id).in_(task_ids))
        )
        return result.rowcount or 0
