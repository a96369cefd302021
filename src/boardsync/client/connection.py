"""Realtime connection to the board server.

A ``RealtimeConnection`` is constructed explicitly by the application root
and opened/closed with sign-in/sign-out. It remembers the rooms it joined,
rejoins them after a reconnect and then runs the ``on_reconnect`` callbacks
so views can refetch whatever they missed while disconnected.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import urlencode
from uuid import UUID

from pydantic import ValidationError
from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidStatus

from src.boardsync.client.api import CredentialStore, Unauthenticated
from src.boardsync.core.logging import get_logger
from src.boardsync.realtime.events import BoardEvent, ClientAction, EventPayload, parse_event

logger = get_logger(__name__)

ReconnectCallback = Callable[[], Awaitable[None]]

_CLOSED = object()


class RealtimeConnection:
    """Async-iterable stream of ``(BoardEvent, payload)`` pairs.

    Args:
        url: WebSocket endpoint, e.g. ``ws://localhost:5000/ws``.
        credentials: Token store; a rejected handshake clears it.
        reconnect_delay: First retry delay, doubled up to ``max_reconnect_delay``.
        connector: Coroutine opening the socket; ``websockets`` by default.
    """

    def __init__(
        self,
        url: str,
        credentials: CredentialStore,
        reconnect_delay: float = 0.5,
        max_reconnect_delay: float = 30.0,
        connector: Callable[[str], Awaitable[Any]] = connect,
    ):
        self.url = url
        self.credentials = credentials
        self.reconnect_delay = reconnect_delay
        self.max_reconnect_delay = max_reconnect_delay
        self._connector = connector
        self._socket: Any = None
        self._reader: asyncio.Task[None] | None = None
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._rooms: set[UUID] = set()
        self._reconnect_callbacks: list[ReconnectCallback] = []
        self._closing = False
        self.last_error: str | None = None

    @property
    def connected(self) -> bool:
        return self._socket is not None

    @property
    def rooms(self) -> frozenset[UUID]:
        return frozenset(self._rooms)

    def on_reconnect(self, callback: ReconnectCallback) -> ReconnectCallback:
        self._reconnect_callbacks.append(callback)
        return callback

    def remove_reconnect_callback(self, callback: ReconnectCallback) -> None:
        if callback in self._reconnect_callbacks:
            self._reconnect_callbacks.remove(callback)

    async def connect(self) -> None:
        """Open the socket and start reading.

        Raises:
            Unauthenticated: No credential, or the server rejected it.
        """
        if self.connected:
            return
        self._closing = False
        self._queue = asyncio.Queue()
        self._socket = await self._open()
        self._reader = asyncio.create_task(self._read_loop())
        logger.info("Realtime connected", url=self.url)

    async def close(self) -> None:
        """Close the socket and end iteration. Joined rooms are forgotten."""
        self._closing = True
        self._rooms.clear()
        if self._socket is not None:
            await self._socket.close()
            self._socket = None
        if self._reader is not None:
            self._reader.cancel()
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
            self._reader = None
        self._queue.put_nowait(_CLOSED)

    async def join(self, project_id: UUID) -> None:
        self._rooms.add(project_id)
        await self._send({"type": ClientAction.JOIN.value, "projectId": str(project_id)})

    async def leave(self, project_id: UUID) -> None:
        self._rooms.discard(project_id)
        await self._send({"type": ClientAction.LEAVE.value, "projectId": str(project_id)})

    async def ping(self) -> None:
        await self._send({"type": ClientAction.PING.value})

    def __aiter__(self) -> "RealtimeConnection":
        return self

    async def __anext__(self) -> tuple[BoardEvent, EventPayload]:
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        if isinstance(item, Exception):
            raise item
        return item

    async def _send(self, frame: dict[str, Any]) -> None:
        # While reconnecting, the room set is replayed once the socket is back.
        if self._socket is None:
            return
        try:
            await self._socket.send(json.dumps(frame))
        except ConnectionClosed:
            logger.debug("Send skipped, connection closed", frame_type=frame.get("type"))

    async def _open(self) -> Any:
        if not self.credentials.token:
            raise Unauthenticated(401, "Sign in before connecting")
        url = f"{self.url}?{urlencode({'token': self.credentials.token})}"
        try:
            return await self._connector(url)
        except InvalidStatus as e:
            if e.response.status_code in (401, 403):
                self.credentials.clear()
                raise Unauthenticated(e.response.status_code, "Realtime connection rejected") from e
            raise

    def _dispatch(self, raw: str | bytes) -> None:
        """Queue a decoded event. Undecodable frames are logged and skipped."""
        try:
            frame = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring non-JSON frame")
            return
        if not isinstance(frame, dict):
            logger.warning("Ignoring non-object frame", frame_type=type(frame).__name__)
            return
        try:
            parsed = parse_event(frame)
        except ValidationError as e:
            logger.warning(
                "Ignoring malformed event", board_event=frame.get("event"), errors=e.error_count()
            )
            return
        if parsed is not None:
            self._queue.put_nowait(parsed)
        elif frame.get("event") == "error":
            data = frame.get("data")
            self.last_error = data.get("detail") if isinstance(data, dict) else None
            logger.warning("Server rejected frame", detail=self.last_error)

    async def _read_loop(self) -> None:
        while not self._closing:
            try:
                async for raw in self._socket:
                    self._dispatch(raw)
            except ConnectionClosed as e:
                logger.warning("Realtime connection lost", error=str(e))
            if self._closing:
                return
            self._socket = None
            if not await self._reconnect():
                return

    async def _reconnect(self) -> bool:
        delay = self.reconnect_delay
        while not self._closing:
            await asyncio.sleep(delay)
            try:
                self._socket = await self._open()
                break
            except Unauthenticated as e:
                self._queue.put_nowait(e)
                self._closing = True
                return False
            except (OSError, TimeoutError, InvalidHandshake) as e:
                logger.info("Reconnect failed", error=str(e), retry_in=delay)
                delay = min(delay * 2, self.max_reconnect_delay)
        if self._closing:
            return False

        logger.info("Realtime reconnected", rooms=len(self._rooms))
        for project_id in list(self._rooms):
            await self._send({"type": ClientAction.JOIN.value, "projectId": str(project_id)})
        for callback in list(self._reconnect_callbacks):
            try:
                await callback()
            except Unauthenticated as e:
                self._queue.put_nowait(e)
            except Exception:
                logger.exception("Reconnect callback failed")
        return True
