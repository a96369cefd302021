"""Tests for board sessions: stale-response guard and event routing."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.boardsync.client.api import ApiError, Forbidden, Unauthenticated
from src.boardsync.client.session import BoardApp, BoardSession
from src.boardsync.models.enums import TaskStatus
from src.boardsync.realtime.events import BoardEvent, TaskCreated
from tests.factories import CommentReadFactory, ProjectReadFactory, TaskReadFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def project():
    return ProjectReadFactory.build()


@pytest.fixture
def api(project):
    api = AsyncMock()
    api.get_project.return_value = project
    api.list_tasks.return_value = [TaskReadFactory.build(project_id=project.id)]
    api.list_comments.return_value = []
    return api


@pytest.fixture
def realtime():
    realtime = MagicMock()
    realtime.join = AsyncMock()
    realtime.leave = AsyncMock()
    return realtime


class TestBoardSession:
    async def test_open_loads_and_joins(self, project, api, realtime):
        session = BoardSession(project.id, api, realtime)
        await session.open()

        assert session.state.project == project
        assert len(session.state.tasks) == 1
        realtime.join.assert_awaited_once_with(project.id)
        realtime.on_reconnect.assert_called_once_with(session.refresh)

    async def test_response_after_close_is_discarded(self, project, api, realtime):
        session = BoardSession(project.id, api, realtime)
        await session.open()

        release = asyncio.Event()

        async def slow_tasks(project_id):
            await release.wait()
            return [TaskReadFactory.build(project_id=project.id, title="Late")]

        api.list_tasks.side_effect = slow_tasks
        pending = asyncio.create_task(session.refresh())
        await asyncio.sleep(0)
        await session.close()
        release.set()

        assert await pending is False
        assert all(t.title != "Late" for t in session.state.tasks)
        realtime.leave.assert_awaited_once_with(project.id)

    async def test_reopen_ignores_previous_generation(self, project, api, realtime):
        session = BoardSession(project.id, api, realtime)
        await session.open()
        release = asyncio.Event()

        async def slow_comments(task_id):
            await release.wait()
            return [CommentReadFactory.build(task_id=task_id)]

        task_id = session.state.tasks[0].id
        api.list_comments.side_effect = slow_comments
        pending = asyncio.create_task(session.load_comments(task_id))
        await asyncio.sleep(0)
        await session.close()
        api.list_comments.side_effect = None
        await session.open()
        release.set()

        assert await pending is False
        assert session.state.thread(task_id).comments == []

    async def test_events_ignored_when_closed(self, project, api, realtime):
        session = BoardSession(project.id, api, realtime)
        task = TaskReadFactory.build(project_id=project.id)
        payload = TaskCreated(task=task, project_id=project.id, actor_id=task.id)

        assert session.handle_event(BoardEvent.TASK_CREATED, payload) is False
        await session.open()
        assert session.handle_event(BoardEvent.TASK_CREATED, payload) is True

    async def test_failed_comment_post_refetches_thread(self, project, api, realtime):
        session = BoardSession(project.id, api, realtime)
        await session.open()
        task_id = session.state.tasks[0].id
        existing = CommentReadFactory.build(task_id=task_id)
        api.create_comment.side_effect = ApiError(500, "Server error")
        api.list_comments.return_value = [existing]

        assert await session.add_comment(task_id, "Hello") is None

        api.list_comments.assert_awaited_once_with(task_id)
        assert session.state.thread(task_id).comments == [existing]

    async def test_failed_comment_delete_refetches_thread(self, project, api, realtime):
        session = BoardSession(project.id, api, realtime)
        await session.open()
        task_id = session.state.tasks[0].id
        comment = CommentReadFactory.build(task_id=task_id)
        session.state.thread(task_id).replace_all([comment])
        api.delete_comment.side_effect = httpx.ConnectError("offline")
        api.list_comments.return_value = [comment]

        assert await session.delete_comment(task_id, comment.id) is False

        api.list_comments.assert_awaited_once_with(task_id)
        assert session.state.thread(task_id).comments == [comment]

    async def test_forbidden_comment_delete_refetches_then_raises(self, project, api, realtime):
        session = BoardSession(project.id, api, realtime)
        await session.open()
        task_id = session.state.tasks[0].id
        comment = CommentReadFactory.build(task_id=task_id)
        api.delete_comment.side_effect = Forbidden(403, "Only the author can delete")

        with pytest.raises(Forbidden):
            await session.delete_comment(task_id, comment.id)
        api.list_comments.assert_awaited_once_with(task_id)

    async def test_unauthenticated_comment_post_is_not_retried(self, project, api, realtime):
        session = BoardSession(project.id, api, realtime)
        await session.open()
        task_id = session.state.tasks[0].id
        api.create_comment.side_effect = Unauthenticated(401, "Token is not valid")

        with pytest.raises(Unauthenticated):
            await session.add_comment(task_id, "Hello")
        api.list_comments.assert_not_awaited()
        api.create_comment.assert_awaited_once()


class TestBoardApp:
    async def test_dispatch_routes_by_project(self, project, api, realtime):
        app = BoardApp("http://board.test", realtime=realtime)
        app.api = api
        board = await app.open_board(project.id)

        mine = TaskReadFactory.build(project_id=project.id, status=TaskStatus.REVIEW)
        other = TaskReadFactory.build()

        assert app.dispatch(
            BoardEvent.TASK_CREATED,
            TaskCreated(task=mine, project_id=project.id, actor_id=mine.id),
        )
        assert not app.dispatch(
            BoardEvent.TASK_CREATED,
            TaskCreated(task=other, project_id=other.project_id, actor_id=other.id),
        )
        assert board.state.task(mine.id) is not None

        await app.close_board(project.id)
        assert project.id not in app.sessions

    def test_ws_url_is_derived(self):
        app = BoardApp("https://board.example.com/")
        assert app.realtime.url == "wss://board.example.com/ws"
