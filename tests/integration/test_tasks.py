"""Tests for task endpoints, access inheritance and task events."""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.boardsync.models import Comment, User
from src.boardsync.realtime import RoomManager
from tests.fakes import RecordingSocket
from tests.helpers import (
    auth_headers,
    create_comment,
    create_project_with_members,
    create_task,
)

pytestmark = pytest.mark.integration


@pytest.fixture
async def project(db_session: AsyncSession, owner: User, member: User):
    return await create_project_with_members(db_session, owner, [member])


@pytest.fixture
def watcher(rooms: RoomManager, project, owner: User) -> RecordingSocket:
    """A socket joined to the project's room."""
    socket = RecordingSocket()
    rooms.join(rooms.register(socket, owner.id), project.id)
    return socket


class TestCreate:
    async def test_defaults(self, client: AsyncClient, project, member: User) -> None:
        response = await client.post(
            "/api/tasks",
            json={"title": "Design API", "project": str(project.id)},
            headers=auth_headers(member),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "todo"
        assert data["priority"] == "medium"
        assert data["tags"] == []
        assert data["comment_count"] == 0
        assert data["time_spent"] == 0
        assert data["created_by_id"] == str(member.id)
        assert data["project_id"] == str(project.id)

    async def test_broadcasts_task_created(
        self, client: AsyncClient, project, member: User, watcher: RecordingSocket
    ) -> None:
        response = await client.post(
            "/api/tasks",
            json={"title": "Design API", "project": str(project.id)},
            headers=auth_headers(member),
        )

        assert response.status_code == 201
        assert watcher.events() == ["task-created"]
        data = watcher.frames[0]["data"]
        assert data["task"]["id"] == response.json()["id"]
        assert data["actorId"] == str(member.id)

    async def test_outsider_forbidden(self, client: AsyncClient, project, outsider: User) -> None:
        response = await client.post(
            "/api/tasks",
            json={"title": "Sneaky", "project": str(project.id)},
            headers=auth_headers(outsider),
        )
        assert response.status_code == 403

    async def test_unknown_project(self, client: AsyncClient, member: User) -> None:
        response = await client.post(
            "/api/tasks",
            json={"title": "Lost", "project": str(uuid4())},
            headers=auth_headers(member),
        )
        assert response.status_code == 404

    @pytest.mark.parametrize(
        "body",
        [{"title": ""}, {"title": "X", "status": "blocked"}, {"title": "X", "priority": "p0"}],
    )
    async def test_invalid_fields(
        self, client: AsyncClient, project, owner: User, body: dict
    ) -> None:
        response = await client.post(
            "/api/tasks", json={**body, "project": str(project.id)}, headers=auth_headers(owner)
        )
        assert response.status_code == 400

    async def test_assignee_must_have_access(
        self, client: AsyncClient, project, owner: User, member: User, outsider: User
    ) -> None:
        ok = await client.post(
            "/api/tasks",
            json={"title": "Mine", "project": str(project.id), "assignee_id": str(member.id)},
            headers=auth_headers(owner),
        )
        bad = await client.post(
            "/api/tasks",
            json={"title": "Theirs", "project": str(project.id), "assignee_id": str(outsider.id)},
            headers=auth_headers(owner),
        )
        assert ok.status_code == 201
        assert bad.status_code == 400


class TestList:
    async def test_newest_first(
        self, client: AsyncClient, project, owner: User, member: User
    ) -> None:
        ids = []
        for title in ("First", "Second"):
            response = await client.post(
                "/api/tasks",
                json={"title": title, "project": str(project.id)},
                headers=auth_headers(owner),
            )
            ids.append(response.json()["id"])

        response = await client.get(f"/api/tasks/project/{project.id}", headers=auth_headers(member))

        assert response.status_code == 200
        assert [t["id"] for t in response.json()] == list(reversed(ids))

    async def test_outsider_forbidden(self, client: AsyncClient, project, outsider: User) -> None:
        response = await client.get(
            f"/api/tasks/project/{project.id}", headers=auth_headers(outsider)
        )
        assert response.status_code == 403

    async def test_unknown_project(self, client: AsyncClient, owner: User) -> None:
        response = await client.get(f"/api/tasks/project/{uuid4()}", headers=auth_headers(owner))
        assert response.status_code == 404


class TestUpdate:
    async def test_partial_update_keeps_other_fields(
        self, client: AsyncClient, db_session: AsyncSession, project, owner: User
    ) -> None:
        task = await create_task(
            db_session, project, owner, title="Keep", tags=["api"], priority="high"
        )
        response = await client.put(
            f"/api/tasks/{task.id}", json={"description": "Details"}, headers=auth_headers(owner)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "Details"
        assert data["title"] == "Keep"
        assert data["tags"] == ["api"]
        assert data["priority"] == "high"

    async def test_status_change_broadcasts_move(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        project,
        owner: User,
        member: User,
        watcher: RecordingSocket,
    ) -> None:
        task = await create_task(db_session, project, owner)
        response = await client.put(
            f"/api/tasks/{task.id}", json={"status": "done"}, headers=auth_headers(member)
        )

        assert response.status_code == 200
        assert response.json()["status"] == "done"
        assert watcher.frames == [
            {
                "event": "task-moved",
                "data": {
                    "taskId": str(task.id),
                    "fromStatus": "todo",
                    "toStatus": "done",
                    "projectId": str(project.id),
                    "actorId": str(member.id),
                },
            }
        ]

    async def test_field_change_broadcasts_only_changed_fields(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        project,
        owner: User,
        watcher: RecordingSocket,
    ) -> None:
        task = await create_task(db_session, project, owner, title="Same")
        response = await client.put(
            f"/api/tasks/{task.id}",
            json={"title": "Same", "priority": "urgent"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 200
        assert watcher.events() == ["task-updated"]
        assert watcher.frames[0]["data"]["updates"] == {"priority": "urgent"}

    async def test_status_and_fields_send_both_events(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        project,
        owner: User,
        watcher: RecordingSocket,
    ) -> None:
        task = await create_task(db_session, project, owner)
        response = await client.put(
            f"/api/tasks/{task.id}",
            json={"status": "review", "tags": ["x"]},
            headers=auth_headers(owner),
        )
        assert response.status_code == 200
        assert watcher.events() == ["task-moved", "task-updated"]
        assert watcher.frames[1]["data"]["updates"] == {"tags": ["x"]}

    async def test_noop_update_is_silent(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        project,
        owner: User,
        watcher: RecordingSocket,
    ) -> None:
        task = await create_task(db_session, project, owner, title="Same")
        response = await client.put(
            f"/api/tasks/{task.id}", json={"title": "Same"}, headers=auth_headers(owner)
        )
        assert response.status_code == 200
        assert watcher.frames == []

    @pytest.mark.parametrize("field", ["title", "status", "priority", "tags"])
    async def test_null_rejected_for_required_fields(
        self, client: AsyncClient, db_session: AsyncSession, project, owner: User, field: str
    ) -> None:
        task = await create_task(db_session, project, owner)
        response = await client.put(
            f"/api/tasks/{task.id}", json={field: None}, headers=auth_headers(owner)
        )
        assert response.status_code == 400

    async def test_null_clears_optional_fields(
        self, client: AsyncClient, db_session: AsyncSession, project, owner: User, member: User
    ) -> None:
        task = await create_task(
            db_session, project, owner, description="Old", assignee_id=member.id
        )
        response = await client.put(
            f"/api/tasks/{task.id}",
            json={"description": None, "assignee_id": None},
            headers=auth_headers(owner),
        )
        assert response.json()["description"] is None
        assert response.json()["assignee_id"] is None

    async def test_project_is_not_updatable(
        self, client: AsyncClient, db_session: AsyncSession, project, owner: User
    ) -> None:
        other = await create_project_with_members(db_session, owner)
        task = await create_task(db_session, project, owner)
        response = await client.put(
            f"/api/tasks/{task.id}", json={"project": str(other.id)}, headers=auth_headers(owner)
        )
        assert response.json()["project_id"] == str(project.id)

    async def test_outsider_forbidden(
        self, client: AsyncClient, db_session: AsyncSession, project, owner: User, outsider: User
    ) -> None:
        task = await create_task(db_session, project, owner)
        response = await client.put(
            f"/api/tasks/{task.id}", json={"status": "done"}, headers=auth_headers(outsider)
        )
        assert response.status_code == 403

    async def test_unknown_task(self, client: AsyncClient, owner: User) -> None:
        response = await client.put(
            f"/api/tasks/{uuid4()}", json={"status": "done"}, headers=auth_headers(owner)
        )
        assert response.status_code == 404


class TestDelete:
    async def test_delete_removes_comments(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        project,
        owner: User,
        member: User,
        watcher: RecordingSocket,
    ) -> None:
        task = await create_task(db_session, project, owner)
        await create_comment(db_session, task, member)

        response = await client.delete(f"/api/tasks/{task.id}", headers=auth_headers(member))

        assert response.status_code == 200
        assert response.json() == {"msg": "Task deleted"}
        assert await db_session.scalar(select(func.count()).select_from(Comment)) == 0
        assert watcher.events() == ["task-deleted"]

    async def test_outsider_forbidden(
        self, client: AsyncClient, db_session: AsyncSession, project, owner: User, outsider: User
    ) -> None:
        task = await create_task(db_session, project, owner)
        response = await client.delete(f"/api/tasks/{task.id}", headers=auth_headers(outsider))
        assert response.status_code == 403
