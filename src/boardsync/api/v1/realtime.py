"""Realtime board channel.

Clients connect to ``/ws?token=<jwt>``, then send ``join-project`` /
``leave-project`` / ``ping`` frames. Board events are pushed by the services
after their mutations commit; nothing a client sends is relayed to others.
"""

from uuid import UUID

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError

from src.boardsync.core.db import get_session
from src.boardsync.core.exceptions import BoardError
from src.boardsync.core.logging import bind_user_context, clear_request_context, get_logger
from src.boardsync.realtime import ClientAction, ClientFrame, Connection, RoomManager, ack
from src.boardsync.repositories import ProjectRepository, TaskRepository, UserRepository
from src.boardsync.services import AuthService
from src.boardsync.services.access import AccessGuard

logger = get_logger(__name__)

router = APIRouter()


async def _authenticate(token: str | None) -> UUID | None:
    async with get_session() as session:
        try:
            user = await AuthService(UserRepository(session), session).authenticate(token)
        except BoardError:
            return None
        return user.id


async def _join(rooms: RoomManager, connection: Connection, project_id: UUID) -> None:
    async with get_session() as session:
        guard = AccessGuard(ProjectRepository(session), TaskRepository(session))
        await guard.authorize_project(project_id, connection.user_id)
    rooms.join(connection, project_id)


async def _handle(rooms: RoomManager, connection: Connection, raw: str) -> None:
    try:
        frame = ClientFrame.model_validate_json(raw)
    except ValidationError:
        await connection.socket.send_json(ack("error", detail="Malformed frame"))
        return

    if frame.type is ClientAction.PING:
        await connection.socket.send_json(ack("pong"))
        return
    if frame.project_id is None:
        await connection.socket.send_json(ack("error", detail="projectId is required"))
        return

    if frame.type is ClientAction.JOIN:
        try:
            await _join(rooms, connection, frame.project_id)
        except BoardError as e:
            await connection.socket.send_json(
                ack("error", detail=e.detail, project_id=str(frame.project_id))
            )
            return
        await connection.socket.send_json(ack("joined", project_id=str(frame.project_id)))
    else:
        rooms.leave(connection, frame.project_id)
        await connection.socket.send_json(ack("left", project_id=str(frame.project_id)))


@router.websocket("/ws")
async def board_socket(
    websocket: WebSocket,
    token: str | None = Query(default=None),
) -> None:
    user_id = await _authenticate(token)
    if user_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    rooms: RoomManager = websocket.app.state.rooms
    connection = rooms.register(websocket, user_id)
    clear_request_context()
    bind_user_context(user_id)
    logger.info("Realtime connection opened", connection_id=connection.id)

    try:
        while True:
            raw = await websocket.receive_text()
            await _handle(rooms, connection, raw)
    except WebSocketDisconnect:
        pass
    finally:
        rooms.disconnect(connection)
        logger.info("Realtime connection closed", connection_id=connection.id)
        clear_request_context()
