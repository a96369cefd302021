"""Comment schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.boardsync.schemas.user import UserSummary


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)
    task_id: UUID = Field(alias="task")

    model_config = {"populate_by_name": True}

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty or whitespace only")
        return v


class CommentRead(BaseModel):
    id: UUID
    content: str
    task_id: UUID
    created_by: UserSummary
    created_at: datetime
