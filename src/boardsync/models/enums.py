"""Shared enums for models."""

from enum import Enum


class TaskStatus(str, Enum):
    """Workflow stage of a task. Declaration order is the workflow order."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    DONE = "done"

    @classmethod
    def ordered(cls) -> list["TaskStatus"]:
        return list(cls)

    @property
    def index(self) -> int:
        return self.ordered().index(self)


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class UserRole(str, Enum):
    """Profile role. Stored for display only; no capability is gated on it."""

    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"
