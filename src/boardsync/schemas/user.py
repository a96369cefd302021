from uuid import UUID

from pydantic import BaseModel


class UserSummary(BaseModel):
    """Populated user reference embedded in projects and comments."""

    id: UUID
    name: str
    email: str
    avatar: str

    model_config = {"from_attributes": True}


