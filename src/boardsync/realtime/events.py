"""Board event taxonomy and payloads.

Events travel as ``{"event": <name>, "data": {...}}`` JSON frames. Payload
keys are camelCase on the wire (``taskId``, ``fromStatus``) so the browser
board and the Python client read the same shape.
"""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.boardsync.models.enums import TaskStatus
from src.boardsync.schemas.comment import CommentRead
from src.boardsync.schemas.project import ProjectRead
from src.boardsync.schemas.task import TaskRead


class BoardEvent(str, Enum):
    TASK_CREATED = "task-created"
    TASK_MOVED = "task-moved"
    TASK_UPDATED = "task-updated"
    TASK_DELETED = "task-deleted"
    COMMENT_ADDED = "comment-added"
    COMMENT_DELETED = "comment-deleted"
    PROJECT_UPDATED = "project-updated"
    PROJECT_DELETED = "project-deleted"
    MEMBER_ADDED = "project-member-added"
    MEMBER_REMOVED = "project-member-removed"


class EventPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreated(EventPayload):
    task: TaskRead
    project_id: UUID
    actor_id: UUID


class TaskMoved(EventPayload):
    task_id: UUID
    from_status: TaskStatus
    to_status: TaskStatus
    project_id: UUID
    actor_id: UUID


class TaskUpdated(EventPayload):
    """``updates`` holds only the fields the mutation actually changed."""

    task_id: UUID
    updates: dict[str, Any]
    project_id: UUID
    actor_id: UUID
    task: TaskRead


class TaskDeleted(EventPayload):
    task_id: UUID
    project_id: UUID
    actor_id: UUID


class CommentAdded(EventPayload):
    task_id: UUID
    project_id: UUID
    comment: CommentRead


class CommentDeleted(EventPayload):
    task_id: UUID
    project_id: UUID
    comment_id: UUID


class ProjectUpdated(EventPayload):
    project: ProjectRead


class ProjectDeleted(EventPayload):
    project_id: UUID


class MemberChanged(EventPayload):
    project_id: UUID
    user_id: UUID
    project: ProjectRead


def envelope(event: BoardEvent, payload: EventPayload) -> dict[str, Any]:
    """Wire frame for a board event."""
    return {"event": event.value, "data": payload.model_dump(mode="json", by_alias=True)}


class ClientAction(str, Enum):
    JOIN = "join-project"
    LEAVE = "leave-project"
    PING = "ping"


class ClientFrame(EventPayload):
    """Frame sent by a client over the realtime channel."""

    type: ClientAction
    project_id: UUID | None = None


def ack(name: str, **data: Any) -> dict[str, Any]:
    """Reply frame (``joined``, ``left``, ``pong``, ``error``) to one connection."""
    return {"event": name, "data": {to_camel(k): v for k, v in data.items()}}


EVENT_PAYLOADS: dict[BoardEvent, type[EventPayload]] = {
    BoardEvent.TASK_CREATED: TaskCreated,
    BoardEvent.TASK_MOVED: TaskMoved,
    BoardEvent.TASK_UPDATED: TaskUpdated,
    BoardEvent.TASK_DELETED: TaskDeleted,
    BoardEvent.COMMENT_ADDED: CommentAdded,
    BoardEvent.COMMENT_DELETED: CommentDeleted,
    BoardEvent.PROJECT_UPDATED: ProjectUpdated,
    BoardEvent.PROJECT_DELETED: ProjectDeleted,
    BoardEvent.MEMBER_ADDED: MemberChanged,
    BoardEvent.MEMBER_REMOVED: MemberChanged,
}


def parse_event(frame: dict[str, Any]) -> tuple[BoardEvent, EventPayload] | None:
    """Decode a board event frame. Returns None for acks and unknown events."""
    try:
        event = BoardEvent(frame.get("event"))
    except ValueError:
        return None
    return event, EVENT_PAYLOADS[event].model_validate(frame.get("data") or {})
