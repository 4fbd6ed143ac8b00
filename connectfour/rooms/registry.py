"""In-memory room domain models and registry."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
import logging
from typing import Any

from connectfour.engine.board import Board
from connectfour.engine.board import create_board

MAX_ROOM_PLAYERS = 2

logger = logging.getLogger(__name__)


class RoomError(Exception):
    """Base class for room-domain errors.

    `client_message` is the text reported to the offending connection.
    """

    client_message = "room error"


class RoomFullError(RoomError):
    """Raised when trying to join a room that already has two players."""

    client_message = "room full"


class AlreadyJoinedError(RoomError):
    """Raised when a connection that is still seated tries to join again."""

    client_message = "already in a room"


class NotInRoomError(RoomError):
    """Raised when a move arrives from a connection without a live seat."""

    client_message = "not in a room"


class InvalidPlayerError(RoomError):
    """Raised when a session slot disagrees with the room's seating."""

    client_message = "invalid player"


class WaitingForOpponentError(RoomError):
    """Raised when a move arrives before the second player has joined."""

    client_message = "waiting for opponent"


class NotYourTurnError(RoomError):
    """Raised when a seated player moves out of turn."""

    client_message = "not your turn"


class InvalidColumnError(RoomError):
    """Raised when a move column is non-numeric or out of range."""

    client_message = "invalid column"


class ColumnFullError(RoomError):
    """Raised when the target column has no empty cell."""

    client_message = "column full"


@dataclass(slots=True, eq=False)
class Room:
    """One pairing context: up to two connections plus a board and turn."""

    key: str
    players: list[Any] = field(default_factory=list)
    board: Board = field(default_factory=create_board)
    current: int = 0

    @property
    def is_active(self) -> bool:
        return len(self.players) == MAX_ROOM_PLAYERS

    def slot_of(self, connection: Any) -> int | None:
        """Return the slot held by `connection`, compared by identity."""
        for slot, player in enumerate(self.players):
            if player is connection:
                return slot
        return None

    def add_player(self, connection: Any) -> int:
        """Seat `connection` in the next free slot and return that slot.

        Seating the second player starts a fresh game: the board is rebuilt
        and slot 0 moves first.
        """
        if len(self.players) >= MAX_ROOM_PLAYERS:
            raise RoomFullError(f"room={self.key!r} is full")
        slot = len(self.players)
        self.players.append(connection)
        if self.is_active:
            self.board = create_board()
            self.current = 0
        return slot

    def opponents_of(self, connection: Any) -> list[Any]:
        return [player for player in self.players if player is not connection]


class RoomRegistry:
    """Process-local registry mapping room keys to live rooms."""

    def __init__(self) -> None:
        self._rooms: dict[str, Room] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def room_keys(self) -> list[str]:
        return sorted(self._rooms)

    def get_room(self, key: str) -> Room | None:
        return self._rooms.get(key)

    def get_or_create_room(self, key: str) -> Room:
        """Return the room for `key`, creating an empty one on first use."""
        room = self._rooms.get(key)
        if room is None:
            room = Room(key=key)
            self._rooms[key] = room
            logger.info("room created key=%r", key)
        return room

    def remove_room(self, key: str, *, reason: str = "removed") -> None:
        """Drop the room for `key`; unknown keys are ignored."""
        if self._rooms.pop(key, None) is not None:
            logger.info("room removed key=%r reason=%s", key, reason)

    def clear(self) -> int:
        """Drop every room and return how many were abandoned."""
        count = len(self._rooms)
        self._rooms.clear()
        return count


__all__ = [
    "AlreadyJoinedError",
    "ColumnFullError",
    "InvalidColumnError",
    "InvalidPlayerError",
    "MAX_ROOM_PLAYERS",
    "NotInRoomError",
    "NotYourTurnError",
    "Room",
    "RoomError",
    "RoomFullError",
    "RoomRegistry",
    "WaitingForOpponentError",
]
