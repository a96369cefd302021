"""Credential bootstrap schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.boardsync.schemas.user import UserSummary


class SyncRequest(BaseModel):
    """Profile reported by the identity provider after sign-in."""

    provider_id: str = Field(alias="clerkId", min_length=1, max_length=255)
    email: EmailStr
    name: str = Field(min_length=1, max_length=200)
    avatar: str | None = Field(default=None, max_length=2048)

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty or whitespace only")
        return v


class SyncResponse(BaseModel):
    token: str
    user: UserSummary
