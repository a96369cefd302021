from fastapi import APIRouter

from src.boardsync.api.v1 import admin, auth, comments, projects, realtime, tasks

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(projects.router)
api_router.include_router(tasks.router)
api_router.include_router(comments.router)
api_router.include_router(admin.router)

ws_router = APIRouter()
ws_router.include_router(realtime.router)
