"""Project and membership operations."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.boardsync.core.config import get_settings
from src.boardsync.core.exceptions import Conflict, NotFound
from src.boardsync.core.logging import get_logger
from src.boardsync.models import Project, User
from src.boardsync.models.base import utc_now
from src.boardsync.realtime import BoardEvent, RoomManager
from src.boardsync.realtime.events import MemberChanged, ProjectDeleted, ProjectUpdated
from src.boardsync.repositories import (
    CommentRepository,
    ProjectRepository,
    TaskRepository,
    UserRepository,
)
from src.boardsync.schemas.project import (
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    ProjectWithTasks,
)
from src.boardsync.schemas.task import TaskRead
from src.boardsync.schemas.user import UserSummary
from src.boardsync.services.access import AccessGuard, AccessRole

logger = get_logger(__name__)


class ProjectService:
    """Project CRUD and membership, each gated by the access guard."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        task_repo: TaskRepository,
        comment_repo: CommentRepository,
        user_repo: UserRepository,
        session: AsyncSession,
        rooms: RoomManager,
    ):
        self.project_repo = project_repo
        self.task_repo = task_repo
        self.comment_repo = comment_repo
        self.user_repo = user_repo
        self.session = session
        self.rooms = rooms
        self.guard = AccessGuard(project_repo, task_repo)

    async def _to_read(self, project: Project, members: list[User] | None = None) -> ProjectRead:
        if members is None:
            members = await self.project_repo.members(project.id)
        owner = next((m for m in members if m.id == project.owner_id), None)
        if owner is None:
            owner = await self.user_repo.get_by_id(project.owner_id)
        return ProjectRead(
            id=project.id,
            title=project.title,
            description=project.description,
            color=project.color,
            owner=UserSummary.model_validate(owner),
            members=[UserSummary.model_validate(m) for m in members],
            created_at=project.created_at,
            updated_at=project.updated_at,
        )

    async def list_for_user(self, user_id: UUID) -> list[ProjectWithTasks]:
        """Projects the user owns or belongs to, newest first, with tasks attached."""
        projects = await self.project_repo.list_accessible(user_id)
        project_ids = [p.id for p in projects]
        members = await self.project_repo.members_for(project_ids)
        tasks = await self.task_repo.list_by_projects(project_ids)

        result = []
        for project in projects:
            read = await self._to_read(project, members[project.id])
            result.append(
                ProjectWithTasks(
                    **read.model_dump(),
                    tasks=[TaskRead.model_validate(t) for t in tasks[project.id]],
                )
            )
        return result

    async def get(self, project_id: UUID, user_id: UUID) -> ProjectRead:
        access = await self.guard.authorize_project(project_id, user_id)
        return await self._to_read(access.project)

    async def create(self, owner: User, data: ProjectCreate) -> ProjectRead:
        """Create a project owned by ``owner``, who also becomes its first member."""
        project = Project(
            title=data.title,
            description=data.description or "",
            color=data.color or get_settings().default_project_color,
            owner_id=owner.id,
        )
        self.project_repo.add(project)
        try:
            await self.session.flush()
            await self.project_repo.add_member(project.id, owner.id)
            await self.session.commit()
            await self.session.refresh(project)
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Project created", project_id=str(project.id))
        return await self._to_read(project, [owner])

    async def update(self, project_id: UUID, user_id: UUID, data: ProjectUpdate) -> ProjectRead:
        """Owner-only partial update of title, description and color."""
        access = await self.guard.authorize_project(project_id, user_id, AccessRole.OWNER)
        project = access.project

        changes = data.model_dump(exclude_unset=True)
        if "title" in changes and changes["title"] is None:
            changes.pop("title")
        if "color" in changes and changes["color"] is None:
            changes.pop("color")
        if "description" in changes and changes["description"] is None:
            changes["description"] = ""

        for field, value in changes.items():
            setattr(project, field, value)
        project.updated_at = utc_now()

        try:
            await self.session.commit()
            await self.session.refresh(project)
        except Exception:
            await self.session.rollback()
            raise

        read = await self._to_read(project)
        await self.rooms.publish(project.id, BoardEvent.PROJECT_UPDATED, ProjectUpdated(project=read))
        return read

    async def delete(self, project_id: UUID, user_id: UUID) -> None:
        """Owner-only delete that removes the project's comments, tasks and memberships too."""
        access = await self.guard.authorize_project(project_id, user_id, AccessRole.OWNER)

        try:
            task_ids = await self.task_repo.ids_by_project(project_id)
            comments_deleted = await self.comment_repo.delete_by_tasks(task_ids)
            tasks_deleted = await self.task_repo.delete_by_project(project_id)
            await self.project_repo.delete_memberships(project_id)
            await self.project_repo.delete(access.project)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Project deleted",
            project_id=str(project_id),
            tasks_deleted=tasks_deleted,
            comments_deleted=comments_deleted,
        )
        await self.rooms.publish(
            project_id, BoardEvent.PROJECT_DELETED, ProjectDeleted(project_id=project_id)
        )
        self.rooms.evict(project_id)

    async def add_member(self, project_id: UUID, user_id: UUID, email: str) -> ProjectRead:
        """Owner-only: add the user registered under ``email``.

        Raises:
            NotFound: No user has that email.
            Conflict: The user is already a member.
        """
        access = await self.guard.authorize_project(project_id, user_id, AccessRole.OWNER)

        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise NotFound("User not found with this email")
        if user.id in access.member_ids:
            raise Conflict("User is already a member")

        try:
            await self.project_repo.add_member(project_id, user.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Member added", project_id=str(project_id), member_id=str(user.id))
        read = await self._to_read(access.project)
        await self.rooms.publish(
            project_id,
            BoardEvent.MEMBER_ADDED,
            MemberChanged(project_id=project_id, user_id=user.id, project=read),
        )
        return read

    async def remove_member(self, project_id: UUID, user_id: UUID, member_id: UUID) -> ProjectRead:
        """Owner-only: remove a member. Removing a non-member is a no-op.

        Raises:
            Conflict: ``member_id`` is the project owner.
        """
        access = await self.guard.authorize_project(project_id, user_id, AccessRole.OWNER)
        if member_id == access.project.owner_id:
            raise Conflict("The project owner cannot be removed")

        try:
            removed = await self.project_repo.remove_member(project_id, member_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        read = await self._to_read(access.project)
        if removed:
            logger.info("Member removed", project_id=str(project_id), member_id=str(member_id))
            await self.rooms.publish(
                project_id,
                BoardEvent.MEMBER_REMOVED,
                MemberChanged(project_id=project_id, user_id=member_id, project=read),
            )
            self.rooms.evict(project_id, [member_id])
        return read
