"""Project schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.boardsync.schemas.task import TaskRead
from src.boardsync.schemas.user import UserSummary


def _strip_title(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            raise ValueError("Project title cannot be empty or whitespace only")
    return v


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    color: str | None = Field(default=None, max_length=32)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _strip_title(v)  # type: ignore[return-value]


class ProjectUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied.

    An empty ``description`` is an explicit value and clears the text.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    color: str | None = Field(default=None, min_length=1, max_length=32)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        return _strip_title(v)


class MemberAdd(BaseModel):
    email: EmailStr


class ProjectRead(BaseModel):
    id: UUID
    title: str
    description: str
    color: str
    owner: UserSummary
    members: list[UserSummary]
    created_at: datetime
    updated_at: datetime


class ProjectWithTasks(ProjectRead):
    """Project with its tasks attached at read time (dashboard shape)."""

    tasks: list[TaskRead]
