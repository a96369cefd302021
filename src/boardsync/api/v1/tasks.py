from uuid import UUID

from fastapi import APIRouter, status

from src.boardsync.api.dependencies import CurrentUser, TaskServiceDep
from src.boardsync.schemas.common import MessageResponse
from src.boardsync.schemas.task import TaskCreate, TaskRead, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])

_ACCESS_ERRORS = {
    403: {"description": "Caller has no access to the project"},
    404: {"description": "Task or project not found"},
}


@router.get(
    "/project/{project_id}",
    response_model=list[TaskRead],
    summary="List project tasks",
    description="Newest first.",
    responses=_ACCESS_ERRORS,
)
async def list_tasks(
    project_id: UUID, user: CurrentUser, service: TaskServiceDep
) -> list[TaskRead]:
    return await service.list_for_project(project_id, user.id)


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    responses=_ACCESS_ERRORS,
)
async def create_task(data: TaskCreate, user: CurrentUser, service: TaskServiceDep) -> TaskRead:
    return await service.create(user.id, data)


@router.put(
    "/{task_id}",
    response_model=TaskRead,
    summary="Update task",
    description="Fields absent from the body are left unchanged; project and creator are fixed.",
    responses=_ACCESS_ERRORS,
)
async def update_task(
    task_id: UUID,
    data: TaskUpdate,
    user: CurrentUser,
    service: TaskServiceDep,
) -> TaskRead:
    return await service.update(task_id, user.id, data)


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    summary="Delete task",
    description="Also deletes the task's comments.",
    responses=_ACCESS_ERRORS,
)
async def delete_task(task_id: UUID, user: CurrentUser, service: TaskServiceDep) -> MessageResponse:
    await service.delete(task_id, user.id)
    return MessageResponse(msg="Task deleted")
