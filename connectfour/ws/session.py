"""Per-connection session record and the join/move/disconnect state machine.

Every handler here is synchronous: it validates, mutates the registry and
returns a `Dispatch` describing what to send. Nothing is awaited between the
read and the write of a room, so one frame is always fully applied before the
event loop can run another.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
import logging
from typing import Any

from connectfour.engine.board import NO_ROW
from connectfour.engine.board import check_winner
from connectfour.engine.board import drop_disc
from connectfour.engine.board import is_board_full
from connectfour.engine.board import is_valid_column
from connectfour.rooms.registry import AlreadyJoinedError
from connectfour.rooms.registry import ColumnFullError
from connectfour.rooms.registry import InvalidColumnError
from connectfour.rooms.registry import InvalidPlayerError
from connectfour.rooms.registry import NotInRoomError
from connectfour.rooms.registry import NotYourTurnError
from connectfour.rooms.registry import Room
from connectfour.rooms.registry import RoomError
from connectfour.rooms.registry import RoomRegistry
from connectfour.rooms.registry import WaitingForOpponentError

from .protocol import ErrorMessage
from .protocol import GameOverMessage
from .protocol import JoinMessage
from .protocol import JoinedMessage
from .protocol import MoveMessage
from .protocol import MovedMessage
from .protocol import OutboundMessage
from .protocol import ProtocolError
from .protocol import StartMessage
from .protocol import UpdateMessage
from .protocol import coerce_column
from .protocol import decode_inbound

OPPONENT_DISCONNECTED = "opponent disconnected"

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Seat:
    """Where a connection sits: the room key and its slot in that room."""

    room_key: str
    slot: int


class ConnectionSession:
    """Room-scoped identity of one connection.

    The seat is assigned as a whole at join time. It is only a reference into
    the registry; the room itself is always looked up again.
    """

    def __init__(self, connection: Any) -> None:
        self.connection = connection
        self.seat: Seat | None = None

    def __repr__(self) -> str:
        return f"ConnectionSession(seat={self.seat!r})"


@dataclass(slots=True)
class Dispatch:
    """Outbound effects of one transition, in delivery order."""

    deliveries: list[tuple[Any, OutboundMessage]] = field(default_factory=list)
    closes: list[Any] = field(default_factory=list)

    def send(self, target: Any, message: OutboundMessage) -> None:
        self.deliveries.append((target, message))

    def broadcast(self, targets: list[Any], message: OutboundMessage) -> None:
        for target in targets:
            self.send(target, message)

    def reply_error(self, target: Any, message: str) -> None:
        self.send(target, ErrorMessage(message=message))


def _resolve_live_room(registry: RoomRegistry, session: ConnectionSession) -> Room | None:
    if session.seat is None:
        return None
    room = registry.get_room(session.seat.room_key)
    if room is None or room.slot_of(session.connection) is None:
        return None
    return room


def _resolve_seat(registry: RoomRegistry, session: ConnectionSession) -> tuple[Room, int]:
    room = _resolve_live_room(registry, session)
    if room is None or session.seat is None:
        raise NotInRoomError("connection has no live seat")
    slot = session.seat.slot
    if room.slot_of(session.connection) != slot:
        raise InvalidPlayerError(f"session slot {slot} does not match room={room.key!r}")
    return room, slot


def handle_join(registry: RoomRegistry, session: ConnectionSession, message: JoinMessage) -> Dispatch:
    dispatch = Dispatch()
    if _resolve_live_room(registry, session) is not None:
        raise AlreadyJoinedError(f"already seated in room={session.seat.room_key!r}")

    room = registry.get_or_create_room(message.room)
    slot = room.add_player(session.connection)
    session.seat = Seat(room_key=room.key, slot=slot)
    dispatch.send(session.connection, JoinedMessage(room=room.key))

    if room.is_active:
        logger.info("game started room=%r", room.key)
        for index, player in enumerate(room.players):
            dispatch.send(player, StartMessage(player_index=index))
            dispatch.send(player, UpdateMessage(board=room.board, current=room.current))
    return dispatch


def handle_move(registry: RoomRegistry, session: ConnectionSession, message: MoveMessage) -> Dispatch:
    dispatch = Dispatch()
    room, slot = _resolve_seat(registry, session)
    if not room.is_active:
        raise WaitingForOpponentError(f"room={room.key!r} has one player")
    if room.current != slot:
        raise NotYourTurnError(f"slot {slot} moved during turn {room.current}")

    column = coerce_column(message.col)
    if column is None or not is_valid_column(column):
        raise InvalidColumnError(f"column {message.col!r} rejected")

    row = drop_disc(room.board, column, slot)
    if row == NO_ROW:
        raise ColumnFullError(f"column {column} is full in room={room.key!r}")

    if check_winner(room.board, row, column, slot):
        dispatch.broadcast(list(room.players), GameOverMessage(winner=slot, board=room.board))
        registry.remove_room(room.key, reason=f"win slot={slot}")
        return dispatch

    if is_board_full(room.board):
        dispatch.broadcast(list(room.players), GameOverMessage(winner=None, board=room.board))
        registry.remove_room(room.key, reason="draw")
        return dispatch

    room.current = 1 - room.current
    dispatch.broadcast(list(room.players), MovedMessage(board=room.board, current=room.current))
    return dispatch


def handle_message(
    registry: RoomRegistry,
    session: ConnectionSession,
    message: JoinMessage | MoveMessage,
) -> Dispatch:
    """Apply one typed message; room-domain rejections become an error reply."""
    try:
        if isinstance(message, JoinMessage):
            return handle_join(registry, session, message)
        if isinstance(message, MoveMessage):
            return handle_move(registry, session, message)
        raise TypeError(f"unhandled message type: {type(message).__name__}")
    except RoomError as exc:
        logger.debug("rejected %s: %s", message.type, exc)
        dispatch = Dispatch()
        dispatch.reply_error(session.connection, exc.client_message)
        return dispatch


def handle_frame(registry: RoomRegistry, session: ConnectionSession, raw: str | bytes) -> Dispatch:
    """Decode one raw frame and apply it."""
    try:
        message = decode_inbound(raw)
    except ProtocolError as exc:
        logger.debug("rejected frame: %s", exc.client_message)
        dispatch = Dispatch()
        dispatch.reply_error(session.connection, exc.client_message)
        return dispatch
    return handle_message(registry, session, message)


def handle_disconnect(registry: RoomRegistry, session: ConnectionSession) -> Dispatch:
    """Tear down the room of a closed connection and evict whoever is left."""
    dispatch = Dispatch()
    room = _resolve_live_room(registry, session)
    if room is None:
        return dispatch

    opponents = room.opponents_of(session.connection)
    dispatch.broadcast(opponents, ErrorMessage(message=OPPONENT_DISCONNECTED))
    dispatch.closes.extend(opponents)
    registry.remove_room(room.key, reason="disconnect")
    return dispatch


__all__ = [
    "ConnectionSession",
    "Dispatch",
    "OPPONENT_DISCONNECTED",
    "Seat",
    "handle_disconnect",
    "handle_frame",
    "handle_join",
    "handle_message",
    "handle_move",
]
