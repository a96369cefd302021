"""Test helper functions for common data creation patterns."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.boardsync.core.config import get_settings
from src.boardsync.core.security import create_access_token
from src.boardsync.models import Comment, Project, Task, User
from tests.factories import (
    CommentFactory,
    ProjectFactory,
    ProjectMemberFactory,
    TaskFactory,
    UserFactory,
)


def auth_headers(user: User) -> dict[str, str]:
    """Headers carrying a freshly issued access token for ``user``."""
    return {get_settings().auth_header_name: create_access_token(user.id)}


async def create_user(session: AsyncSession, **user_kwargs) -> User:
    user = UserFactory.build(**user_kwargs)
    session.add(user)
    await session.commit()
    return user


async def create_project_with_members(
    session: AsyncSession,
    owner: User,
    members: list[User] | None = None,
    **project_kwargs,
) -> Project:
    """Create a project owned by ``owner`` with ``members`` after the owner.

    Args:
        session: Database session
        owner: Project owner, stored as the first member
        members: Additional members in membership order
        **project_kwargs: Additional args passed to ProjectFactory

    Returns:
        The committed project
    """
    project = ProjectFactory.build(owner_id=owner.id, **project_kwargs)
    session.add(project)
    await session.flush()

    for position, user in enumerate([owner, *(members or [])]):
        session.add(
            ProjectMemberFactory.build(project_id=project.id, user_id=user.id, position=position)
        )
    await session.commit()
    return project


async def create_task(
    session: AsyncSession, project: Project, creator: User, **task_kwargs
) -> Task:
    task = TaskFactory.build(project_id=project.id, created_by_id=creator.id, **task_kwargs)
    session.add(task)
    await session.commit()
    return task


async def create_comment(
    session: AsyncSession, task: Task, author: User, **comment_kwargs
) -> Comment:
    """Insert a comment and bump the task counter the way the service does."""
    comment = CommentFactory.build(task_id=task.id, created_by_id=author.id, **comment_kwargs)
    session.add(comment)
    task.comment_count += 1
    session.add(task)
    await session.commit()
    return comment
