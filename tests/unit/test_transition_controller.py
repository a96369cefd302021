"""Tests for optimistic status transitions and their rollback."""

from unittest.mock import AsyncMock

import httpx
import pytest

from src.boardsync.client.api import ApiError, Forbidden, Unauthenticated
from src.boardsync.client.controller import TransitionController
from src.boardsync.client.state import BoardState
from src.boardsync.models.enums import TaskStatus
from tests.factories import ProjectReadFactory, TaskReadFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def board():
    project = ProjectReadFactory.build()
    state = BoardState(project.id)
    state.load(project, [TaskReadFactory.build(project_id=project.id, status=TaskStatus.TODO)])
    return state


@pytest.fixture
def api():
    return AsyncMock()


@pytest.fixture
def refetch():
    return AsyncMock()


@pytest.fixture
def controller(board, api, refetch):
    return TransitionController(board, api, refetch)


class TestTransitions:
    async def test_drag_applies_server_copy(self, board, api, controller):
        task = board.tasks[0]
        confirmed = task.model_copy(update={"status": TaskStatus.DONE, "title": "Server"})
        api.update_task.return_value = confirmed

        assert await controller.drag_to(task.id, TaskStatus.DONE) is True

        api.update_task.assert_awaited_once_with(task.id, status=TaskStatus.DONE)
        assert board.task(task.id) == confirmed

    async def test_keyboard_steps_one_column(self, board, api, controller):
        task = board.tasks[0]
        api.update_task.side_effect = lambda task_id, status: task.model_copy(
            update={"status": status}
        )

        assert await controller.keyboard_move(task.id, "next") is True
        assert board.task(task.id).status is TaskStatus.IN_PROGRESS

    async def test_keyboard_at_first_column_is_noop(self, board, api, controller):
        assert await controller.keyboard_move(board.tasks[0].id, "prev") is False
        api.update_task.assert_not_awaited()

    async def test_same_status_is_noop(self, board, api, controller):
        assert await controller.drag_to(board.tasks[0].id, TaskStatus.TODO) is False
        api.update_task.assert_not_awaited()

    async def test_unknown_task(self, api, controller, board):
        other = TaskReadFactory.build()
        assert await controller.drag_to(other.id, TaskStatus.DONE) is False


class TestRollback:
    @pytest.mark.parametrize(
        "error", [ApiError(500, "boom"), httpx.ConnectError("unreachable")]
    )
    async def test_failure_reverts_and_refetches(self, board, api, refetch, controller, error):
        task = board.tasks[0]
        api.update_task.side_effect = error

        assert await controller.drag_to(task.id, TaskStatus.DONE) is False

        assert board.task(task.id).status is TaskStatus.TODO
        refetch.assert_awaited_once()

    async def test_forbidden_reverts_refetches_and_raises(self, board, api, refetch, controller):
        task = board.tasks[0]
        api.update_task.side_effect = Forbidden(403, "Access denied")

        with pytest.raises(Forbidden):
            await controller.drag_to(task.id, TaskStatus.DONE)

        assert board.task(task.id).status is TaskStatus.TODO
        refetch.assert_awaited_once()

    async def test_unauthenticated_reverts_without_refetch(self, board, api, refetch, controller):
        task = board.tasks[0]
        api.update_task.side_effect = Unauthenticated(401, "expired")

        with pytest.raises(Unauthenticated):
            await controller.drag_to(task.id, TaskStatus.DONE)

        assert board.task(task.id).status is TaskStatus.TODO
        refetch.assert_not_awaited()

    async def test_failed_refetch_is_logged_not_raised(self, board, api, refetch, controller):
        task = board.tasks[0]
        api.update_task.side_effect = ApiError(500, "boom")
        refetch.side_effect = httpx.ReadTimeout("slow")

        assert await controller.drag_to(task.id, TaskStatus.DONE) is False
        assert board.task(task.id).status is TaskStatus.TODO

    async def test_refetch_auth_failure_propagates(self, board, api, refetch, controller):
        api.update_task.side_effect = ApiError(500, "boom")
        refetch.side_effect = Unauthenticated(401, "expired")

        with pytest.raises(Unauthenticated):
            await controller.drag_to(board.tasks[0].id, TaskStatus.DONE)
