"""Status transitions from drag-and-drop and keyboard gestures.

Both gestures apply the new status locally first, then send the update. When
the request fails the local change is reverted and the board is refetched.
Credential and permission failures are re-raised after that rollback so the
caller can sign out or deny; they are never retried.
"""

from collections.abc import Awaitable, Callable
from typing import Literal
from uuid import UUID

import httpx

from src.boardsync.client.api import ApiError, BoardApiClient, Forbidden, Unauthenticated
from src.boardsync.client.state import BoardState
from src.boardsync.core.logging import get_logger
from src.boardsync.models.enums import TaskStatus

logger = get_logger(__name__)

Direction = Literal["prev", "next"]


def step_status(status: TaskStatus, direction: Direction) -> TaskStatus:
    """Adjacent status in workflow order, clamped at both ends."""
    order = TaskStatus.ordered()
    offset = -1 if direction == "prev" else 1
    index = min(max(status.index + offset, 0), len(order) - 1)
    return order[index]


class TransitionController:
    def __init__(
        self,
        state: BoardState,
        api: BoardApiClient,
        refetch: Callable[[], Awaitable[object]],
    ):
        self.state = state
        self.api = api
        self.refetch = refetch

    async def drag_to(self, task_id: UUID, status: TaskStatus) -> bool:
        """Move a task to any column. Returns True when the server accepted it."""
        return await self._transition(task_id, lambda _current: status)

    async def keyboard_move(self, task_id: UUID, direction: Direction) -> bool:
        """Move a task one column left or right. No-op at the first and last column."""
        return await self._transition(task_id, lambda current: step_status(current, direction))

    async def _transition(
        self, task_id: UUID, target: Callable[[TaskStatus], TaskStatus]
    ) -> bool:
        task = self.state.task(task_id)
        if task is None:
            return False
        previous = task.status
        status = target(previous)
        if status is previous:
            return False

        self.state.set_status(task_id, status)
        try:
            confirmed = await self.api.update_task(task_id, status=status)
        except Unauthenticated:
            # The credential is gone; a refetch would only fail the same way.
            self.state.set_status(task_id, previous)
            raise
        except Forbidden:
            await self._rollback(task_id, previous)
            raise
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Status change failed, refetching", task_id=str(task_id), error=str(e))
            await self._rollback(task_id, previous)
            return False

        self.state.upsert_task(confirmed)
        return True

    async def _rollback(self, task_id: UUID, previous: TaskStatus) -> None:
        self.state.set_status(task_id, previous)
        try:
            await self.refetch()
        except (Unauthenticated, Forbidden):
            raise
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Rollback refetch failed", task_id=str(task_id), error=str(e))
