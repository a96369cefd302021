"""FastAPI dependency injection definitions."""

from src.boardsync.api.dependencies.auth import CurrentUser, extract_token, get_current_user
from src.boardsync.api.dependencies.db import DBSession, get_db_session
from src.boardsync.api.dependencies.repositories import (
    CommentRepo,
    ProjectRepo,
    TaskRepo,
    UserRepo,
    get_comment_repository,
    get_project_repository,
    get_task_repository,
    get_user_repository,
)
from src.boardsync.api.dependencies.services import (
    AdminServiceDep,
    AuthServiceDep,
    CommentServiceDep,
    ProjectServiceDep,
    Rooms,
    TaskServiceDep,
    get_admin_service,
    get_auth_service,
    get_comment_service,
    get_project_service,
    get_rooms,
    get_task_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "CurrentUser",
    "extract_token",
    "get_current_user",
    # Repositories
    "CommentRepo",
    "ProjectRepo",
    "TaskRepo",
    "UserRepo",
    "get_comment_repository",
    "get_project_repository",
    "get_task_repository",
    "get_user_repository",
    # Services
    "AdminServiceDep",
    "AuthServiceDep",
    "CommentServiceDep",
    "ProjectServiceDep",
    "Rooms",
    "TaskServiceDep",
    "get_admin_service",
    "get_auth_service",
    "get_comment_service",
    "get_project_service",
    "get_rooms",
    "get_task_service",
]
