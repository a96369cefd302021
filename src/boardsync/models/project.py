"""Project and membership models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.boardsync.models.base import utc_now


class Project(SQLModel, table=True):
    """A board. ``owner_id`` is fixed at creation."""

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200)
    description: str = Field(default="", max_length=2000)
    color: str = Field(max_length=32)
    owner_id: UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class ProjectMember(SQLModel, table=True):
    """Ordered membership of a user in a project.

    The owner is inserted at position 0 when the project is created.
    """

    __tablename__ = "project_members"

    project_id: UUID = Field(foreign_key="projects.id", primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", primary_key=True, index=True)
    position: int = Field(default=0)
    joined_at: datetime = Field(default_factory=utc_now)
