"""Task model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from src.boardsync.models.base import utc_now
from src.boardsync.models.enums import TaskPriority, TaskStatus


class Task(SQLModel, table=True):
    """A card on a project board.

    ``comment_count`` is denormalized and only ever changed by atomic
    increment/decrement statements issued alongside comment writes.
    """

    __tablename__ = "tasks"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=300)
    description: str | None = Field(default=None, max_length=5000)
    status: str = Field(default=TaskStatus.TODO.value, max_length=20, index=True)
    priority: str = Field(default=TaskPriority.MEDIUM.value, max_length=20)
    assignee_id: UUID | None = Field(default=None, foreign_key="users.id")
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    due_date: datetime | None = Field(default=None)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    position: float = Field(default=0)
    time_estimate: float | None = Field(default=None)
    time_spent: float = Field(default=0)
    comment_count: int = Field(default=0)
    created_by_id: UUID | None = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
