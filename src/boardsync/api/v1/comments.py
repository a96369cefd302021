from uuid import UUID

from fastapi import APIRouter, status

from src.boardsync.api.dependencies import CommentServiceDep, CurrentUser
from src.boardsync.schemas.comment import CommentCreate, CommentRead
from src.boardsync.schemas.common import MessageResponse

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get(
    "/task/{task_id}",
    response_model=list[CommentRead],
    summary="List task comments",
    description="Newest first, with the author populated.",
    responses={
        403: {"description": "Caller has no access to the project"},
        404: {"description": "Task not found"},
    },
)
async def list_comments(
    task_id: UUID, user: CurrentUser, service: CommentServiceDep
) -> list[CommentRead]:
    return await service.list_for_task(task_id, user.id)


@router.post(
    "",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add comment",
    responses={
        403: {"description": "Caller has no access to the project"},
        404: {"description": "Task not found"},
    },
)
async def create_comment(
    data: CommentCreate, user: CurrentUser, service: CommentServiceDep
) -> CommentRead:
    return await service.create(user, data)


@router.delete(
    "/{comment_id}",
    response_model=MessageResponse,
    summary="Delete comment",
    description="Author only.",
    responses={
        403: {"description": "Caller is not the author"},
        404: {"description": "Comment not found"},
    },
)
async def delete_comment(
    comment_id: UUID, user: CurrentUser, service: CommentServiceDep
) -> MessageResponse:
    await service.delete(comment_id, user.id)
    return MessageResponse(msg="Comment deleted")
