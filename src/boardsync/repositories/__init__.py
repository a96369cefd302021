"""Repository layer - data access abstraction."""

from src.boardsync.repositories.base import BaseRepository
from src.boardsync.repositories.comment import CommentRepository
from src.boardsync.repositories.project import ProjectRepository
from src.boardsync.repositories.task import TaskRepository
from src.boardsync.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "ProjectRepository",
    "TaskRepository",
    "UserRepository",
]
