"""Task schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.boardsync.models.enums import TaskPriority, TaskStatus


def _strip_title(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            raise ValueError("Task title cannot be empty or whitespace only")
    return v


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    project_id: UUID = Field(alias="project")
    description: str | None = Field(default=None, max_length=5000)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: UUID | None = None
    due_date: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    position: float = 0
    time_estimate: float | None = Field(default=None, ge=0)

    model_config = {"populate_by_name": True}

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _strip_title(v)  # type: ignore[return-value]


class TaskUpdate(BaseModel):
    """Partial update; ``project`` and ``created_by`` are not updatable."""

    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None, max_length=5000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: UUID | None = None
    due_date: datetime | None = None
    tags: list[str] | None = None
    position: float | None = None
    time_estimate: float | None = Field(default=None, ge=0)
    time_spent: float | None = Field(default=None, ge=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        return _strip_title(v)


class TaskRead(BaseModel):
    id: UUID
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    assignee_id: UUID | None
    project_id: UUID
    due_date: datetime | None
    tags: list[str]
    position: float
    time_estimate: float | None
    time_spent: float
    comment_count: int
    created_by_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
