"""Tests for per-project broadcast rooms."""

from uuid import uuid4

import pytest

from src.boardsync.realtime import BoardEvent, RoomManager
from src.boardsync.realtime.events import ProjectDeleted
from src.boardsync.realtime.rooms import DROPPED_CLOSE_CODE
from tests.fakes import RecordingSocket

pytestmark = pytest.mark.unit


def _event(project_id):
    return BoardEvent.PROJECT_DELETED, ProjectDeleted(project_id=project_id)


class TestMembership:
    def test_join_multiple_rooms(self):
        rooms = RoomManager()
        connection = rooms.register(RecordingSocket(), uuid4())
        first, second = uuid4(), uuid4()
        rooms.join(connection, first)
        rooms.join(connection, second)

        assert connection.rooms == {first, second}
        assert connection in rooms.members(first)
        assert connection in rooms.members(second)

    def test_leave_removes_empty_room(self):
        rooms = RoomManager()
        connection = rooms.register(RecordingSocket(), uuid4())
        project_id = uuid4()
        rooms.join(connection, project_id)
        rooms.leave(connection, project_id)
        assert rooms.room_ids() == []
        # Leaving again is harmless.
        rooms.leave(connection, project_id)

    def test_disconnect_leaves_every_room(self):
        rooms = RoomManager()
        connection = rooms.register(RecordingSocket(), uuid4())
        rooms.join(connection, uuid4())
        rooms.join(connection, uuid4())
        rooms.disconnect(connection)
        assert rooms.room_ids() == []
        assert rooms.connection_count == 0

    def test_evict_selected_users(self):
        rooms = RoomManager()
        project_id = uuid4()
        keep = rooms.register(RecordingSocket(), uuid4())
        drop = rooms.register(RecordingSocket(), uuid4())
        rooms.join(keep, project_id)
        rooms.join(drop, project_id)

        assert rooms.evict(project_id, [drop.user_id]) == 1
        assert rooms.members(project_id) == {keep}
        assert rooms.evict(project_id) == 1
        assert rooms.members(project_id) == set()


class TestPublish:
    async def test_only_room_members_receive(self):
        rooms = RoomManager()
        project_a, project_b = uuid4(), uuid4()
        sender, peer, elsewhere = RecordingSocket(), RecordingSocket(), RecordingSocket()
        for socket, project_id in ((sender, project_a), (peer, project_a), (elsewhere, project_b)):
            rooms.join(rooms.register(socket, uuid4()), project_id)

        delivered = await rooms.publish(project_a, *_event(project_a))

        assert delivered == 2
        # The originator is not filtered out.
        assert len(sender.frames) == 1
        assert peer.frames == [
            {"event": "project-deleted", "data": {"projectId": str(project_a)}}
        ]
        assert elsewhere.frames == []

    async def test_empty_room(self):
        assert await RoomManager().publish(uuid4(), *_event(uuid4())) == 0

    async def test_failed_socket_is_pruned(self):
        rooms = RoomManager()
        project_id = uuid4()
        good = rooms.register(RecordingSocket(), uuid4())
        bad = rooms.register(RecordingSocket(fail=True), uuid4())
        rooms.join(good, project_id)
        rooms.join(bad, project_id)

        assert await rooms.publish(project_id, *_event(project_id)) == 1
        assert rooms.members(project_id) == {good}
        assert rooms.connection_count == 1
        # The dropped client is told, so it reconnects and refetches.
        assert bad.socket.close_code == DROPPED_CLOSE_CODE
        assert good.socket.close_code is None

    async def test_stalled_socket_times_out(self):
        rooms = RoomManager(send_timeout=0.01)
        project_id = uuid4()
        slow = rooms.register(RecordingSocket(stall=True), uuid4())
        rooms.join(slow, project_id)

        assert await rooms.publish(project_id, *_event(project_id)) == 0
        assert rooms.members(project_id) == set()
        assert slow.socket.close_code == DROPPED_CLOSE_CODE

    async def test_left_connection_gets_nothing(self):
        rooms = RoomManager()
        project_id = uuid4()
        socket = RecordingSocket()
        connection = rooms.register(socket, uuid4())
        rooms.join(connection, project_id)
        rooms.leave(connection, project_id)

        await rooms.publish(project_id, *_event(project_id))
        assert socket.frames == []

    async def test_delivery_is_logged(self, capturing_logger):
        rooms = RoomManager()
        project_id = uuid4()
        rooms.join(rooms.register(RecordingSocket(), uuid4()), project_id)

        assert await rooms.publish(project_id, *_event(project_id)) == 1

        delivered = [
            c for c in capturing_logger.calls if c.kwargs.get("event") == "Broadcast delivered"
        ]
        assert len(delivered) == 1
        assert delivered[0].kwargs["board_event"] == "project-deleted"
        assert delivered[0].kwargs["delivered"] == 1
