"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.boardsync.api.dependencies.db import DBSession
from src.boardsync.repositories import (
    CommentRepository,
    ProjectRepository,
    TaskRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_task_repository(session: DBSession) -> TaskRepository:
    return TaskRepository(session)


def get_comment_repository(session: DBSession) -> CommentRepository:
    return CommentRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
TaskRepo = Annotated[TaskRepository, Depends(get_task_repository)]
CommentRepo = Annotated[CommentRepository, Depends(get_comment_repository)]
