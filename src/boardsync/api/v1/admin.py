from typing import Any

from fastapi import APIRouter

from src.boardsync.api.dependencies import AdminServiceDep, CurrentUser

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/reset",
    summary="Reset database",
    description="Deletes all data. Disabled when APP_ENV is production.",
    responses={403: {"description": "Running in production"}},
)
async def reset(user: CurrentUser, service: AdminServiceDep) -> dict[str, Any]:
    deleted = await service.reset()
    return {"msg": "Database reset", "deleted": deleted}
