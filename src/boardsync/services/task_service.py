"""Task operations for project members."""

from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.boardsync.core.exceptions import ValidationFailed
from src.boardsync.core.logging import get_logger
from src.boardsync.models import Task
from src.boardsync.models.base import utc_now
from src.boardsync.models.enums import TaskStatus
from src.boardsync.realtime import BoardEvent, RoomManager
from src.boardsync.realtime.events import TaskCreated, TaskDeleted, TaskMoved, TaskUpdated
from src.boardsync.repositories import CommentRepository, ProjectRepository, TaskRepository
from src.boardsync.schemas.task import TaskCreate, TaskRead, TaskUpdate
from src.boardsync.services.access import AccessGuard, ProjectAccess, access_role

logger = get_logger(__name__)

# Columns that reject an explicit null in a partial update.
NON_NULLABLE_FIELDS = frozenset(
    {"title", "status", "priority", "tags", "position", "time_spent"}
)


class TaskService:
    def __init__(
        self,
        task_repo: TaskRepository,
        project_repo: ProjectRepository,
        comment_repo: CommentRepository,
        session: AsyncSession,
        rooms: RoomManager,
    ):
        self.task_repo = task_repo
        self.project_repo = project_repo
        self.comment_repo = comment_repo
        self.session = session
        self.rooms = rooms
        self.guard = AccessGuard(project_repo, task_repo)

    @staticmethod
    def _check_assignee(access: ProjectAccess, assignee_id: UUID | None) -> None:
        if assignee_id is not None and access_role(
            access.project, access.member_ids, assignee_id
        ) is None:
            raise ValidationFailed("Assignee must be a member of the project")

    async def list_for_project(self, project_id: UUID, user_id: UUID) -> list[TaskRead]:
        await self.guard.authorize_project(project_id, user_id, conceal=False)
        tasks = await self.task_repo.list_by_project(project_id)
        return [TaskRead.model_validate(t) for t in tasks]

    async def create(self, user_id: UUID, data: TaskCreate) -> TaskRead:
        """Create a task in a project the caller can access."""
        access = await self.guard.authorize_project(data.project_id, user_id, conceal=False)
        self._check_assignee(access, data.assignee_id)

        task = Task(
            title=data.title,
            description=data.description,
            status=data.status.value,
            priority=data.priority.value,
            assignee_id=data.assignee_id,
            project_id=data.project_id,
            due_date=data.due_date,
            tags=list(data.tags),
            position=data.position,
            time_estimate=data.time_estimate,
            created_by_id=user_id,
        )
        self.task_repo.add(task)
        try:
            await self.session.commit()
            await self.session.refresh(task)
        except Exception:
            await self.session.rollback()
            raise

        read = TaskRead.model_validate(task)
        await self.rooms.publish(
            task.project_id,
            BoardEvent.TASK_CREATED,
            TaskCreated(task=read, project_id=task.project_id, actor_id=user_id),
        )
        return read

    async def update(self, task_id: UUID, user_id: UUID, data: TaskUpdate) -> TaskRead:
        """Partial update by any project member.

        A status change is announced as ``task-moved``; changes to any other
        field as ``task-updated`` carrying just the changed fields.
        """
        task, access = await self.guard.authorize_task(task_id, user_id)

        patch = data.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS & patch.keys():
            if patch[field] is None:
                raise ValidationFailed(f"{field} cannot be null")
        if "assignee_id" in patch:
            self._check_assignee(access, patch["assignee_id"])

        from_status = TaskStatus(task.status)
        changed: dict[str, Any] = {}
        for field, value in patch.items():
            if isinstance(value, Enum):
                value = value.value
            if getattr(task, field) != value:
                setattr(task, field, value)
                changed[field] = value

        if not changed:
            return TaskRead.model_validate(task)

        task.updated_at = utc_now()
        try:
            await self.session.commit()
            await self.session.refresh(task)
        except Exception:
            await self.session.rollback()
            raise

        read = TaskRead.model_validate(task)
        status_changed = changed.pop("status", None) is not None
        if status_changed:
            await self.rooms.publish(
                task.project_id,
                BoardEvent.TASK_MOVED,
                TaskMoved(
                    task_id=task.id,
                    from_status=from_status,
                    to_status=read.status,
                    project_id=task.project_id,
                    actor_id=user_id,
                ),
            )
        if changed:
            updates = read.model_dump(mode="json", include=set(changed))
            await self.rooms.publish(
                task.project_id,
                BoardEvent.TASK_UPDATED,
                TaskUpdated(
                    task_id=task.id,
                    updates=updates,
                    project_id=task.project_id,
                    actor_id=user_id,
                    task=read,
                ),
            )
        return read

    async def delete(self, task_id: UUID, user_id: UUID) -> None:
        """Delete a task and its comments."""
        task, _ = await self.guard.authorize_task(task_id, user_id)
        project_id = task.project_id

        try:
            comments_deleted = await self.comment_repo.delete_by_tasks([task.id])
            await self.task_repo.delete(task)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Task deleted", task_id=str(task_id), comments_deleted=comments_deleted)
        await self.rooms.publish(
            project_id,
            BoardEvent.TASK_DELETED,
            TaskDeleted(task_id=task_id, project_id=project_id, actor_id=user_id),
        )
