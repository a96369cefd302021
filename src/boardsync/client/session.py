"""Board sessions and the client application root.

``BoardApp`` owns the credential store, the REST client and the single
realtime connection. Each open board is a ``BoardSession``; events from the
shared connection are routed to the session of the event's project.
"""

import asyncio
from typing import Any
from uuid import UUID

import httpx

from src.boardsync.client.api import (
    ApiError,
    BoardApiClient,
    CredentialStore,
    Forbidden,
    Unauthenticated,
)
from src.boardsync.client.connection import RealtimeConnection
from src.boardsync.client.controller import TransitionController
from src.boardsync.client.state import BoardState, DashboardStats, dashboard_stats, event_project_id
from src.boardsync.core.logging import get_logger
from src.boardsync.realtime.events import BoardEvent, EventPayload
from src.boardsync.schemas.comment import CommentRead

logger = get_logger(__name__)


class BoardSession:
    """One open project board.

    Every network response is checked against the session's generation before
    it is applied. Closing the board bumps the generation, so a response that
    lands after close is dropped instead of touching stale state.
    """

    def __init__(self, project_id: UUID, api: BoardApiClient, realtime: RealtimeConnection):
        self.project_id = project_id
        self.api = api
        self.realtime = realtime
        self.state = BoardState(project_id)
        self.controller = TransitionController(self.state, api, self.refresh)
        self._generation = 0
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def _is_current(self, generation: int) -> bool:
        return self._active and generation == self._generation

    async def open(self) -> None:
        """Load the snapshot, then join the project's room."""
        self._active = True
        self._generation += 1
        await self.refresh()
        await self.realtime.join(self.project_id)
        self.realtime.remove_reconnect_callback(self.refresh)
        self.realtime.on_reconnect(self.refresh)

    async def close(self) -> None:
        self._active = False
        self._generation += 1
        self.realtime.remove_reconnect_callback(self.refresh)
        await self.realtime.leave(self.project_id)

    async def refresh(self) -> bool:
        """Refetch project and tasks. Returns False when the result was discarded."""
        generation = self._generation
        project, tasks = await asyncio.gather(
            self.api.get_project(self.project_id),
            self.api.list_tasks(self.project_id),
        )
        if not self._is_current(generation):
            logger.debug("Discarding stale board response", project_id=str(self.project_id))
            return False
        self.state.load(project, tasks)
        # Open comment threads may have missed events too.
        for task_id, thread in list(self.state.threads.items()):
            if thread.loaded:
                await self.load_comments(task_id)
        return True

    async def load_comments(self, task_id: UUID) -> bool:
        generation = self._generation
        comments = await self.api.list_comments(task_id)
        if not self._is_current(generation):
            return False
        self.state.thread(task_id).replace_all(comments)
        return True

    async def add_comment(self, task_id: UUID, content: str) -> CommentRead | None:
        """Post a comment and merge it; the broadcast echo of it is then a no-op.

        Returns None when the request failed and the thread was refetched instead.
        """
        generation = self._generation
        try:
            comment = await self.api.create_comment(task_id, content)
        except Unauthenticated:
            raise
        except Forbidden:
            await self._reconcile_comments(task_id)
            raise
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Comment post failed, refetching", task_id=str(task_id), error=str(e))
            await self._reconcile_comments(task_id)
            return None
        if self._is_current(generation):
            self.state.add_comment(comment)
        return comment

    async def delete_comment(self, task_id: UUID, comment_id: UUID) -> bool:
        """Delete a comment. False when the request failed and the thread was refetched."""
        generation = self._generation
        try:
            await self.api.delete_comment(comment_id)
        except Unauthenticated:
            raise
        except Forbidden:
            await self._reconcile_comments(task_id)
            raise
        except (ApiError, httpx.HTTPError) as e:
            logger.warning(
                "Comment delete failed, refetching", comment_id=str(comment_id), error=str(e)
            )
            await self._reconcile_comments(task_id)
            return False
        if self._is_current(generation):
            self.state.remove_comment(task_id, comment_id)
        return True

    async def _reconcile_comments(self, task_id: UUID) -> None:
        try:
            await self.load_comments(task_id)
        except (Unauthenticated, Forbidden):
            raise
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Comment refetch failed", task_id=str(task_id), error=str(e))

    def handle_event(self, event: BoardEvent, payload: EventPayload) -> bool:
        if not self._active:
            return False
        return self.state.apply_event(event, payload)


class BoardApp:
    """Client application root.

    Args:
        base_url: Server root, e.g. ``http://localhost:5000``.
        ws_url: Realtime endpoint; derived from ``base_url`` when omitted.
        transport: Optional httpx transport for the REST client.
        realtime: Prebuilt realtime connection; it must share ``credentials``.
        credentials: Token store shared by the REST and realtime clients.
    """

    def __init__(
        self,
        base_url: str,
        ws_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        realtime: RealtimeConnection | None = None,
        credentials: CredentialStore | None = None,
    ):
        self.credentials = credentials or CredentialStore()
        self.api = BoardApiClient(base_url, self.credentials, transport=transport)
        if realtime is None:
            if ws_url is None:
                ws_url = base_url.rstrip("/").replace("http", "ws", 1) + "/ws"
            realtime = RealtimeConnection(ws_url, self.credentials)
        self.realtime = realtime
        self.sessions: dict[UUID, BoardSession] = {}
        self._pump: asyncio.Task[None] | None = None

    @property
    def signed_in(self) -> bool:
        return self.credentials.is_authenticated

    async def sign_in(
        self, provider_id: str, email: str, name: str, avatar: str | None = None
    ) -> dict[str, Any]:
        """Sync the provider profile, then open the realtime connection."""
        user = await self.api.sync_user(provider_id, email, name, avatar)
        await self.realtime.connect()
        self._pump = asyncio.create_task(self._pump_events())
        return user

    async def sign_out(self) -> None:
        for project_id in list(self.sessions):
            await self.close_board(project_id)
        await self.realtime.close()
        if self._pump is not None and self._pump is not asyncio.current_task():
            await self._pump
        self._pump = None
        self.credentials.clear()

    async def open_board(self, project_id: UUID) -> BoardSession:
        session = self.sessions.get(project_id)
        if session is None:
            session = BoardSession(project_id, self.api, self.realtime)
            self.sessions[project_id] = session
        await session.open()
        return session

    async def close_board(self, project_id: UUID) -> None:
        session = self.sessions.pop(project_id, None)
        if session is not None:
            await session.close()

    async def dashboard(self) -> DashboardStats:
        return dashboard_stats(await self.api.list_projects())

    def dispatch(self, event: BoardEvent, payload: EventPayload) -> bool:
        session = self.sessions.get(event_project_id(payload))  # type: ignore[arg-type]
        if session is None:
            return False
        return session.handle_event(event, payload)

    async def _pump_events(self) -> None:
        try:
            async for event, payload in self.realtime:
                self.dispatch(event, payload)
        except Unauthenticated:
            logger.info("Realtime credential rejected, signing out")
            await self.sign_out()

    async def aclose(self) -> None:
        if self._pump is not None or self.realtime.connected:
            await self.sign_out()
        await self.api.aclose()
