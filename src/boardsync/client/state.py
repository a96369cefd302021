"""Client-side board model.

Local optimistic changes and broadcast events feed the same ``BoardState``.
Every insert is keyed by entity id, so applying the same change twice (the
optimistic copy and then the server's echo) leaves one entry.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

from src.boardsync.core.logging import get_logger
from src.boardsync.models.enums import TaskStatus
from src.boardsync.realtime.events import (
    BoardEvent,
    CommentAdded,
    CommentDeleted,
    EventPayload,
    MemberChanged,
    ProjectUpdated,
    TaskCreated,
    TaskDeleted,
    TaskMoved,
    TaskUpdated,
)
from src.boardsync.schemas.comment import CommentRead
from src.boardsync.schemas.project import ProjectRead, ProjectWithTasks
from src.boardsync.schemas.task import TaskRead

logger = get_logger(__name__)

STATUS_WEIGHTS: dict[TaskStatus, int] = {
    TaskStatus.TODO: 0,
    TaskStatus.IN_PROGRESS: 33,
    TaskStatus.REVIEW: 66,
    TaskStatus.DONE: 100,
}

COMMENTS_PER_PAGE = 10


def workflow_progress(tasks: Iterable[TaskRead | TaskStatus | str]) -> int:
    """Weighted completion percentage, 0 for no tasks. Halves round up."""
    statuses = [TaskStatus(getattr(t, "status", t)) for t in tasks]
    if not statuses:
        return 0
    average = sum(STATUS_WEIGHTS[s] for s in statuses) / len(statuses)
    return math.floor(average + 0.5)


@dataclass(frozen=True)
class DashboardStats:
    total_tasks: int
    completed_projects: int
    open_tasks: int
    total_members: int
    progress: dict[UUID, int]


def dashboard_stats(projects: Iterable[ProjectWithTasks]) -> DashboardStats:
    """Aggregates over the project list.

    A project counts as completed only when it has tasks and all are done.
    ``total_members`` counts member slots, so a user in two projects counts twice.
    """
    projects = list(projects)
    total = sum(len(p.tasks) for p in projects)
    done = sum(1 for p in projects for t in p.tasks if t.status is TaskStatus.DONE)
    completed = sum(
        1 for p in projects if p.tasks and all(t.status is TaskStatus.DONE for t in p.tasks)
    )
    return DashboardStats(
        total_tasks=total,
        completed_projects=completed,
        open_tasks=total - done,
        total_members=sum(len(p.members) for p in projects),
        progress={p.id: workflow_progress(p.tasks) for p in projects},
    )


def event_project_id(payload: EventPayload) -> UUID | None:
    """Project a decoded event belongs to."""
    if isinstance(payload, ProjectUpdated):
        return payload.project.id
    return getattr(payload, "project_id", None)


@dataclass
class CommentThread:
    """Comments of one task, newest first, shown a page at a time."""

    task_id: UUID
    comments: list[CommentRead] = field(default_factory=list)
    display_count: int = COMMENTS_PER_PAGE
    loaded: bool = False
    removed_ids: set[UUID] = field(default_factory=set)

    @property
    def visible(self) -> list[CommentRead]:
        return self.comments[: self.display_count]

    @property
    def has_more(self) -> bool:
        return len(self.comments) > self.display_count

    def show_more(self) -> None:
        self.display_count += COMMENTS_PER_PAGE

    def replace_all(self, comments: Iterable[CommentRead]) -> None:
        self.comments = sorted(comments, key=lambda c: c.created_at, reverse=True)
        self.loaded = True

    def add(self, comment: CommentRead) -> bool:
        """Insert or replace by id. Returns True only for a new comment."""
        for i, existing in enumerate(self.comments):
            if existing.id == comment.id:
                self.comments[i] = comment
                return False
        self.comments.insert(0, comment)
        return True

    def remove(self, comment_id: UUID) -> bool:
        self.removed_ids.add(comment_id)
        before = len(self.comments)
        self.comments = [c for c in self.comments if c.id != comment_id]
        return len(self.comments) != before


class BoardState:
    """State of one open project board."""

    def __init__(self, project_id: UUID):
        self.project_id = project_id
        self.project: ProjectRead | None = None
        self.tasks: list[TaskRead] = []
        self.threads: dict[UUID, CommentThread] = {}
        self.deleted = False

    def load(self, project: ProjectRead, tasks: Iterable[TaskRead]) -> None:
        """Replace the whole snapshot (initial load and every refetch)."""
        self.project = project
        self.tasks = list(tasks)
        self.deleted = False

    def task(self, task_id: UUID) -> TaskRead | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    def tasks_by_status(self, status: TaskStatus) -> list[TaskRead]:
        return [t for t in self.tasks if t.status is status]

    def upsert_task(self, task: TaskRead) -> bool:
        """Replace a task by id, or put a new one at the top. True when new."""
        for i, existing in enumerate(self.tasks):
            if existing.id == task.id:
                self.tasks[i] = task
                return False
        self.tasks.insert(0, task)
        return True

    def set_status(self, task_id: UUID, status: TaskStatus) -> TaskStatus | None:
        """Change a task's status locally. Returns the previous status."""
        task = self.task(task_id)
        if task is None:
            return None
        self.upsert_task(task.model_copy(update={"status": status}))
        return task.status

    def remove_task(self, task_id: UUID) -> bool:
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        self.threads.pop(task_id, None)
        return len(self.tasks) != before

    def thread(self, task_id: UUID) -> CommentThread:
        return self.threads.setdefault(task_id, CommentThread(task_id))

    def _adjust_comment_count(self, task_id: UUID, delta: int) -> None:
        task = self.task(task_id)
        if task is not None:
            count = max(0, task.comment_count + delta)
            self.upsert_task(task.model_copy(update={"comment_count": count}))

    def add_comment(self, comment: CommentRead) -> bool:
        added = self.thread(comment.task_id).add(comment)
        if added:
            self._adjust_comment_count(comment.task_id, 1)
        return added

    def remove_comment(self, task_id: UUID, comment_id: UUID) -> bool:
        thread = self.thread(task_id)
        if comment_id in thread.removed_ids:
            return False
        removed = thread.remove(comment_id)
        # An unloaded thread cannot tell whether the comment was counted; trust the server.
        if removed or not thread.loaded:
            self._adjust_comment_count(task_id, -1)
        return removed

    def apply_event(self, event: BoardEvent, payload: EventPayload) -> bool:
        """Merge a broadcast event. Returns False when it is not for this board."""
        if event_project_id(payload) != self.project_id:
            return False

        if isinstance(payload, TaskCreated | TaskUpdated):
            self.upsert_task(payload.task)
        elif isinstance(payload, TaskMoved):
            if self.set_status(payload.task_id, payload.to_status) is None:
                logger.debug("Move for unknown task", task_id=str(payload.task_id))
        elif isinstance(payload, TaskDeleted):
            self.remove_task(payload.task_id)
        elif isinstance(payload, CommentAdded):
            self.add_comment(payload.comment)
        elif isinstance(payload, CommentDeleted):
            self.remove_comment(payload.task_id, payload.comment_id)
        elif isinstance(payload, ProjectUpdated | MemberChanged):
            self.project = payload.project
        elif event is BoardEvent.PROJECT_DELETED:
            self.deleted = True
            self.tasks = []
            self.threads.clear()
        return True

    def workflow_progress(self) -> int:
        return workflow_progress(self.tasks)
