"""Python client for boards: REST calls, realtime events and local board state."""

from src.boardsync.client.api import (
    ApiError,
    BoardApiClient,
    CredentialStore,
    Forbidden,
    Unauthenticated,
)
from src.boardsync.client.connection import RealtimeConnection
from src.boardsync.client.controller import TransitionController, step_status
from src.boardsync.client.session import BoardApp, BoardSession
from src.boardsync.client.state import (
    BoardState,
    CommentThread,
    DashboardStats,
    dashboard_stats,
    workflow_progress,
)

__all__ = [
    "ApiError",
    "BoardApiClient",
    "BoardApp",
    "BoardSession",
    "BoardState",
    "CommentThread",
    "CredentialStore",
    "DashboardStats",
    "Forbidden",
    "RealtimeConnection",
    "TransitionController",
    "Unauthenticated",
    "dashboard_stats",
    "step_status",
    "workflow_progress",
]
