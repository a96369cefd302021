"""Project endpoints.

Projects the caller cannot access are reported as 404, the same as projects
that do not exist.
"""

from uuid import UUID

from fastapi import APIRouter, status

from src.boardsync.api.dependencies import CurrentUser, ProjectServiceDep
from src.boardsync.schemas.common import MessageResponse
from src.boardsync.schemas.project import (
    MemberAdd,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    ProjectWithTasks,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=list[ProjectWithTasks],
    summary="List projects",
    description="Projects the caller owns or is a member of, newest first, with their tasks.",
)
async def list_projects(
    user: CurrentUser, service: ProjectServiceDep
) -> list[ProjectWithTasks]:
    return await service.list_for_user(user.id)


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(
    project_id: UUID, user: CurrentUser, service: ProjectServiceDep
) -> ProjectRead:
    return await service.get(project_id, user.id)


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description="The caller becomes owner and first member.",
    responses={400: {"description": "Missing title"}},
)
async def create_project(
    data: ProjectCreate, user: CurrentUser, service: ProjectServiceDep
) -> ProjectRead:
    return await service.create(user, data)


@router.put(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    description="Owner only. Fields absent from the body are left unchanged.",
    responses={
        403: {"description": "Caller is not the owner"},
        404: {"description": "Project not found"},
    },
)
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    user: CurrentUser,
    service: ProjectServiceDep,
) -> ProjectRead:
    return await service.update(project_id, user.id, data)


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    summary="Delete project",
    description="Owner only. Also deletes the project's tasks and their comments.",
    responses={
        403: {"description": "Caller is not the owner"},
        404: {"description": "Project not found"},
    },
)
async def delete_project(
    project_id: UUID, user: CurrentUser, service: ProjectServiceDep
) -> MessageResponse:
    await service.delete(project_id, user.id)
    return MessageResponse(msg="Project deleted")


@router.post(
    "/{project_id}/members",
    response_model=ProjectRead,
    summary="Add member",
    description="Owner only. Adds the registered user with the given email.",
    responses={
        400: {"description": "User is already a member"},
        403: {"description": "Caller is not the owner"},
        404: {"description": "Project or user not found"},
    },
)
async def add_member(
    project_id: UUID,
    data: MemberAdd,
    user: CurrentUser,
    service: ProjectServiceDep,
) -> ProjectRead:
    return await service.add_member(project_id, user.id, data.email)


@router.delete(
    "/{project_id}/members/{member_id}",
    response_model=ProjectRead,
    summary="Remove member",
    description="Owner only. Removing a non-member is a no-op; the owner cannot be removed.",
    responses={
        400: {"description": "Attempt to remove the owner"},
        403: {"description": "Caller is not the owner"},
        404: {"description": "Project not found"},
    },
)
async def remove_member(
    project_id: UUID,
    member_id: UUID,
    user: CurrentUser,
    service: ProjectServiceDep,
) -> ProjectRead:
    return await service.remove_member(project_id, user.id, member_id)
