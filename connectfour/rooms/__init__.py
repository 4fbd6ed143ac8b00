"""Room domain package."""

from connectfour.rooms.registry import AlreadyJoinedError
from connectfour.rooms.registry import ColumnFullError
from connectfour.rooms.registry import InvalidColumnError
from connectfour.rooms.registry import InvalidPlayerError
from connectfour.rooms.registry import MAX_ROOM_PLAYERS
from connectfour.rooms.registry import NotInRoomError
from connectfour.rooms.registry import NotYourTurnError
from connectfour.rooms.registry import Room
from connectfour.rooms.registry import RoomError
from connectfour.rooms.registry import RoomFullError
from connectfour.rooms.registry import RoomRegistry
from connectfour.rooms.registry import WaitingForOpponentError

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
