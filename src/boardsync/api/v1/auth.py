from fastapi import APIRouter

from src.boardsync.api.dependencies import AuthServiceDep
from src.boardsync.schemas.auth import SyncRequest, SyncResponse
from src.boardsync.schemas.user import UserSummary

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/sync",
    response_model=SyncResponse,
    summary="Sync identity-provider user",
    description="Find or create the user for a provider identity and issue an access token.",
    responses={
        200: {"description": "Access token and user profile"},
        400: {"description": "Invalid profile or email owned by another identity"},
    },
)
async def sync(data: SyncRequest, auth_service: AuthServiceDep) -> SyncResponse:
    token, user = await auth_service.sync_user(data)
    return SyncResponse(token=token, user=UserSummary.model_validate(user))
