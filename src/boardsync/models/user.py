"""User model - identities synced from the external identity provider."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.boardsync.models.base import utc_now
from src.boardsync.models.enums import UserRole


class User(SQLModel, table=True):
    """A person known to the board.

    Created on the first successful credential sync and never deleted by the
    application. ``provider_id`` is the stable id issued by the identity
    provider; ``id`` is the internal id carried in access tokens.
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    provider_id: str = Field(max_length=255, unique=True, index=True)
    name: str = Field(max_length=200)
    email: str = Field(max_length=255, unique=True, index=True)
    role: str = Field(default=UserRole.MEMBER.value, max_length=20)
    avatar: str = Field(default="", max_length=2048)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
