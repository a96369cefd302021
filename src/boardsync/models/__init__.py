"""Model exports.

Import from here: `from src.boardsync.models import User, Project`
"""

from src.boardsync.models.comment import Comment
from src.boardsync.models.enums import TaskPriority, TaskStatus, UserRole
from src.boardsync.models.project import Project, ProjectMember
from src.boardsync.models.task import Task
from src.boardsync.models.user import User

__all__ = [
    # Enums
    "TaskPriority",
    "TaskStatus",
    "UserRole",
    # Tables
    "Comment",
    "Project",
    "ProjectMember",
    "Task",
    "User",
]
