"""Service factory dependencies.

Services that publish board events get the application's ``RoomManager``
from ``app.state`` so every request shares the same rooms.
"""

from typing import Annotated

from fastapi import Depends, Request

from src.boardsync.api.dependencies.db import DBSession
from src.boardsync.api.dependencies.repositories import (
    CommentRepo,
    ProjectRepo,
    TaskRepo,
    UserRepo,
)
from src.boardsync.realtime import RoomManager
from src.boardsync.services import (
    AdminService,
    AuthService,
    CommentService,
    ProjectService,
    TaskService,
)


def get_rooms(request: Request) -> RoomManager:
    return request.app.state.rooms


Rooms = Annotated[RoomManager, Depends(get_rooms)]


def get_auth_service(user_repo: UserRepo, session: DBSession) -> AuthService:
    return AuthService(user_repo, session)


def get_project_service(
    project_repo: ProjectRepo,
    task_repo: TaskRepo,
    comment_repo: CommentRepo,
    user_repo: UserRepo,
    session: DBSession,
    rooms: Rooms,
) -> ProjectService:
    return ProjectService(project_repo, task_repo, comment_repo, user_repo, session, rooms)


def get_task_service(
    task_repo: TaskRepo,
    project_repo: ProjectRepo,
    comment_repo: CommentRepo,
    session: DBSession,
    rooms: Rooms,
) -> TaskService:
    return TaskService(task_repo, project_repo, comment_repo, session, rooms)


def get_comment_service(
    comment_repo: CommentRepo,
    task_repo: TaskRepo,
    project_repo: ProjectRepo,
    user_repo: UserRepo,
    session: DBSession,
    rooms: Rooms,
) -> CommentService:
    return CommentService(comment_repo, task_repo, project_repo, user_repo, session, rooms)


def get_admin_service(session: DBSession, rooms: Rooms) -> AdminService:
    return AdminService(session, rooms)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
