"""Realtime fan-out of board mutations."""

from src.boardsync.realtime.events import (
    BoardEvent,
    ClientAction,
    ClientFrame,
    ack,
    envelope,
    parse_event,
)
from src.boardsync.realtime.rooms import Connection, RoomManager

__all__ = [
    "BoardEvent",
    "ClientAction",
    "ClientFrame",
    "Connection",
    "RoomManager",
    "ack",
    "envelope",
    "parse_event",
]
