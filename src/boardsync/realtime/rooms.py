"""Per-project broadcast rooms.

A room is the set of live connections that joined a project. Rooms exist only
in this process and are rebuilt from scratch as clients reconnect and join.
Delivery is at-most-once: a connection receives an event only if it was in
the room when the event was published, and a connection whose send fails or
times out is dropped from every room and its socket is closed, which sends
the client down its reconnect-and-refetch path.

All mutation of the room table happens in synchronous sections on the event
loop, so join/leave/publish never interleave half-way.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol
from uuid import UUID, uuid4

from src.boardsync.core.logging import get_logger
from src.boardsync.realtime.events import BoardEvent, EventPayload, envelope

logger = get_logger(__name__)

# Internal error: the server gave up on delivering to this connection.
DROPPED_CLOSE_CODE = 1011


class JsonSocket(Protocol):
    """What the room manager needs from a transport (Starlette's WebSocket fits)."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


@dataclass(eq=False)
class Connection:
    """One live client session and the project rooms it has joined."""

    socket: JsonSocket
    user_id: UUID
    id: str = field(default_factory=lambda: uuid4().hex)
    rooms: set[UUID] = field(default_factory=set)


class RoomManager:
    """Routes board events to the connections joined to a project's room."""

    def __init__(self, send_timeout: float = 5.0):
        self.send_timeout = send_timeout
        self._rooms: dict[UUID, set[Connection]] = {}
        self._connections: set[Connection] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def register(self, socket: JsonSocket, user_id: UUID) -> Connection:
        """Track a newly accepted socket (Connected, not yet joined)."""
        connection = Connection(socket=socket, user_id=user_id)
        self._connections.add(connection)
        return connection

    def join(self, connection: Connection, project_id: UUID) -> None:
        """Add the connection to a project's room. Other joined rooms are kept."""
        self._rooms.setdefault(project_id, set()).add(connection)
        connection.rooms.add(project_id)
        logger.info(
            "Connection joined room",
            connection_id=connection.id,
            room=str(project_id),
            connections=len(self._rooms[project_id]),
        )

    def leave(self, connection: Connection, project_id: UUID) -> None:
        members = self._rooms.get(project_id)
        if members is not None:
            members.discard(connection)
            if not members:
                del self._rooms[project_id]
        connection.rooms.discard(project_id)

    def disconnect(self, connection: Connection) -> None:
        """Forget the connection and remove it from every room."""
        for project_id in list(connection.rooms):
            self.leave(connection, project_id)
        self._connections.discard(connection)

    def members(self, project_id: UUID) -> set[Connection]:
        return set(self._rooms.get(project_id, ()))

    def room_ids(self) -> list[UUID]:
        return list(self._rooms)

    def evict(self, project_id: UUID, user_ids: Iterable[UUID] | None = None) -> int:
        """Remove connections from a room, all of them or only those of ``user_ids``."""
        targets = self.members(project_id)
        if user_ids is not None:
            wanted = set(user_ids)
            targets = {c for c in targets if c.user_id in wanted}
        for connection in targets:
            self.leave(connection, project_id)
        return len(targets)

    async def publish(
        self,
        project_id: UUID,
        event: BoardEvent,
        payload: EventPayload,
    ) -> int:
        """Send an event to every connection joined to the room right now.

        The originating client is not filtered out. Returns the number of
        connections the frame was delivered to.
        """
        recipients = list(self._rooms.get(project_id, ()))
        if not recipients:
            return 0

        frame = envelope(event, payload)
        results = await asyncio.gather(
            *(self._send(connection, frame) for connection in recipients)
        )
        dead = [c for c, ok in zip(recipients, results, strict=True) if not ok]
        for connection in dead:
            self.disconnect(connection)
        # A dropped client must reconnect and refetch to see what it missed.
        await asyncio.gather(*(self._close(connection) for connection in dead))

        logger.debug(
            "Broadcast delivered",
            room=str(project_id),
            board_event=event.value,
            delivered=len(recipients) - len(dead),
            pruned=len(dead),
        )
        return len(recipients) - len(dead)

    async def _send(self, connection: Connection, frame: dict[str, Any]) -> bool:
        try:
            await asyncio.wait_for(connection.socket.send_json(frame), timeout=self.send_timeout)
            return True
        except Exception as e:
            logger.warning(
                "Dropping connection after failed send",
                connection_id=connection.id,
                error=str(e),
            )
            return False

    async def _close(self, connection: Connection) -> None:
        try:
            await asyncio.wait_for(
                connection.socket.close(code=DROPPED_CLOSE_CODE), timeout=self.send_timeout
            )
        except Exception as e:
            logger.debug(
                "Close of dropped connection failed",
                connection_id=connection.id,
                error=str(e),
            )
