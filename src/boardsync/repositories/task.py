"""Repository for Task entity."""

from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import col, select

from src.boardsync.models import Task
from src.boardsync.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    model = Task

    async def list_by_project(self, project_id: UUID) -> list[Task]:
        """Tasks of one project, newest first."""
        result = await self.session.execute(
            select(Task)
            .where(Task.project_id == project_id)
            .order_by(col(Task.created_at).desc())
        )
        return list(result.scalars().all())

    async def list_by_projects(self, project_ids: list[UUID]) -> dict[UUID, list[Task]]:
        """Tasks for several projects in one query, keyed by project id."""
        grouped: dict[UUID, list[Task]] = {project_id: [] for project_id in project_ids}
        if not project_ids:
            return grouped
        result = await self.session.execute(
            select(Task)
            .where(col(Task.project_id).in_(project_ids))
            .order_by(col(Task.created_at).desc())
        )
        for task in result.scalars().all():
            grouped[task.project_id].append(task)
        return grouped

    async def ids_by_project(self, project_id: UUID) -> list[UUID]:
        result = await self.session.execute(select(Task.id).where(Task.project_id == project_id))
        return list(result.scalars().all())

    async def increment_comment_count(self, task_id: UUID) -> None:
        """Atomically add one to the comment counter (single UPDATE statement)."""
        await self.session.execute(
            update(Task)
            .where(col(Task.id) == task_id)
            .values(comment_count=col(Task.comment_count) + 1)
        )

    async def decrement_comment_count(self, task_id: UUID) -> bool:
        """Atomically subtract one from the comment counter, never below zero.

        Returns False when the counter was already zero and nothing changed.
        """
        result = await self.session.execute(
            update(Task)
            .where(col(Task.id) == task_id, col(Task.comment_count) > 0)
            .values(comment_count=col(Task.comment_count) - 1)
        )
        return bool(result.rowcount)

    async def delete_by_project(self, project_id: UUID) -> int:
        result = await self.session.execute(
            delete(Task).where(col(Task.project_id) == project_id)
        )
        return result.rowcount or 0
