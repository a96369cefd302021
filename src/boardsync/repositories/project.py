"""Repository for Project entity and its membership rows."""

from uuid import UUID

from sqlalchemy import delete, func, or_
from sqlmodel import col, select

from src.boardsync.models import Project, ProjectMember, User
from src.boardsync.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    async def list_accessible(self, user_id: UUID) -> list[Project]:
        """Projects the user owns or is a member of, newest first."""
        member_of = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
        result = await self.session.execute(
            select(Project)
            .where(or_(Project.owner_id == user_id, col(Project.id).in_(member_of)))
            .order_by(col(Project.created_at).desc())
        )
        return list(result.scalars().all())

    async def member_ids(self, project_id: UUID) -> list[UUID]:
        """Member ids in insertion order (owner first at creation)."""
        result = await self.session.execute(
            select(ProjectMember.user_id)
            .where(ProjectMember.project_id == project_id)
            .order_by(col(ProjectMember.position))
        )
        return list(result.scalars().all())

    async def members(self, project_id: UUID) -> list[User]:
        result = await self.session.execute(
            select(User)
            .join(ProjectMember, col(ProjectMember.user_id) == col(User.id))
            .where(ProjectMember.project_id == project_id)
            .order_by(col(ProjectMember.position))
        )
        return list(result.scalars().all())

    async def members_for(self, project_ids: list[UUID]) -> dict[UUID, list[User]]:
        """Members for several projects in one query, keyed by project id."""
        grouped: dict[UUID, list[User]] = {project_id: [] for project_id in project_ids}
        if not project_ids:
            return grouped
        result = await self.session.execute(
            select(ProjectMember.project_id, User)
            .join(User, col(ProjectMember.user_id) == col(User.id))
            .where(col(ProjectMember.project_id).in_(project_ids))
            .order_by(col(ProjectMember.position))
        )
        for project_id, user in result.all():
            grouped[project_id].append(user)
        return grouped

    async def is_member(self, project_id: UUID, user_id: UUID) -> bool:
        result = await self.session.execute(
            select(ProjectMember.user_id).where(
                ProjectMember.project_id == project_id,
                ProjectMember.user_id == user_id,
            )
        )
        return result.scalar_one_or_none() is not None

    async def add_member(self, project_id: UUID, user_id: UUID) -> ProjectMember:
        """Append a member after the current last position (no commit)."""
        result = await self.session.execute(
            select(func.max(ProjectMember.position)).where(ProjectMember.project_id == project_id)
        )
        last = result.scalar_one_or_none()
        membership = ProjectMember(
            project_id=project_id,
            user_id=user_id,
            position=0 if last is None else last + 1,
        )
        self.session.add(membership)
        return membership

    async def remove_member(self, project_id: UUID, user_id: UUID) -> bool:
        """Delete a membership row. Returns False when there was none."""
        result = await self.session.execute(
            delete(ProjectMember).where(
                col(ProjectMember.project_id) == project_id,
                col(ProjectMember.user_id) == user_id,
            )
        )
        return bool(result.rowcount)

    async def delete_memberships(self, project_id: UUID) -> int:
        result = await self.session.execute(
            delete(ProjectMember).where(col(ProjectMember.project_id) == project_id)
        )
        return result.rowcount or 0
