"""Authorization guard shared by every board operation.

One rule, applied uniformly: a user can access a project iff they own it or
are in its member list. Tasks inherit the rule from their project, comments
from their task. Owner-only operations additionally require ownership, and
comment deletion requires authorship.
"""

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from src.boardsync.core.exceptions import Forbidden, NotFound
from src.boardsync.models import Comment, Project, Task
from src.boardsync.repositories import ProjectRepository, TaskRepository


class AccessRole(str, Enum):
    OWNER = "owner"
    MEMBER = "member"


@dataclass(frozen=True)
class ProjectAccess:
    """Result of a successful access check."""

    project: Project
    member_ids: list[UUID]
    role: AccessRole

    @property
    def is_owner(self) -> bool:
        return self.role is AccessRole.OWNER


def access_role(project: Project, member_ids: Collection[UUID], user_id: UUID) -> AccessRole | None:
    """Role of ``user_id`` on ``project``, or None when they have no access."""
    if user_id == project.owner_id:
        return AccessRole.OWNER
    if user_id in member_ids:
        return AccessRole.MEMBER
    return None


def require_comment_author(comment: Comment, user_id: UUID) -> None:
    """Only the author may delete a comment; ownership of the project does not count."""
    if comment.created_by_id != user_id:
        raise Forbidden("Only the author can delete this comment")


class AccessGuard:
    def __init__(self, project_repo: ProjectRepository, task_repo: TaskRepository):
        self.project_repo = project_repo
        self.task_repo = task_repo

    async def authorize_project(
        self,
        project_id: UUID,
        user_id: UUID,
        required: AccessRole = AccessRole.MEMBER,
        conceal: bool = True,
    ) -> ProjectAccess:
        """Resolve the caller's access to a project.

        Args:
            project_id: Project being accessed.
            user_id: Authenticated caller.
            required: ``OWNER`` for owner-only operations.
            conceal: When True a project the caller cannot see is reported as
                missing, so its existence does not leak.

        Raises:
            NotFound: The project does not exist (or is concealed).
            Forbidden: The caller lacks access or the required role.
        """
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFound("Project not found")

        member_ids = await self.project_repo.member_ids(project_id)
        role = access_role(project, member_ids, user_id)
        if role is None:
            if conceal:
                raise NotFound("Project not found")
            raise Forbidden("Access denied")
        if required is AccessRole.OWNER and role is not AccessRole.OWNER:
            raise Forbidden("Only the project owner can do this")

        return ProjectAccess(project=project, member_ids=member_ids, role=role)

    async def authorize_task(self, task_id: UUID, user_id: UUID) -> tuple[Task, ProjectAccess]:
        """Resolve a task and the caller's access to its parent project."""
        task = await self.task_repo.get_by_id(task_id)
        if task is None:
            raise NotFound("Task not found")
        try:
            access = await self.authorize_project(task.project_id, user_id, conceal=False)
        except NotFound as e:
            # Parent project is gone; the task is unreachable.
            raise NotFound("Task not found") from e
        return task, access
