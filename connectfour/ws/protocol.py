"""WebSocket wire protocol: typed inbound/outbound frames and JSON codec."""

from __future__ import annotations

import json
import math
from typing import Annotated
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import TypeAdapter
from pydantic import ValidationError
from pydantic import field_validator

Grid = list[list[int | None]]


class ProtocolError(Exception):
    """Raised when an inbound frame cannot be decoded into a known message."""

    def __init__(self, client_message: str) -> None:
        super().__init__(client_message)
        self.client_message = client_message


class JoinMessage(BaseModel):
    """`{type: "join", room}`.

    Scalar room keys are coerced to strings the way a browser would print them
    (`true`, `3` for `3.0`). Falsy keys become `""`. Arrays and objects are
    rejected.
    """

    model_config = ConfigDict(extra="ignore")

    type: Literal["join"]
    room: str = ""

    @field_validator("room", mode="before")
    @classmethod
    def coerce_room_key(cls, value: Any) -> str:
        if isinstance(value, (list, dict)):
            raise ValueError("room key must be a scalar")
        if not value:
            return ""
        if isinstance(value, bool):
            return "true"
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)


class MoveMessage(BaseModel):
    """`{type: "move", col}`; `col` is checked by the session, not here."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["move"]
    col: Any = None


InboundMessage = Annotated[JoinMessage | MoveMessage, Field(discriminator="type")]

_INBOUND_ADAPTER: TypeAdapter[JoinMessage | MoveMessage] = TypeAdapter(InboundMessage)
_UNKNOWN_TAG_ERRORS = {"union_tag_invalid", "union_tag_not_found"}


class JoinedMessage(BaseModel):
    type: Literal["joined"] = "joined"
    room: str


class StartMessage(BaseModel):
    type: Literal["start"] = "start"
    player_index: int = Field(serialization_alias="playerIndex")


class UpdateMessage(BaseModel):
    type: Literal["update"] = "update"
    board: Grid
    current: int


class MovedMessage(BaseModel):
    type: Literal["moved"] = "moved"
    board: Grid
    current: int


class GameOverMessage(BaseModel):
    type: Literal["game_over"] = "game_over"
    winner: int | None
    board: Grid


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str


OutboundMessage = (
    JoinedMessage | StartMessage | UpdateMessage | MovedMessage | GameOverMessage | ErrorMessage
)


def decode_inbound(raw: str | bytes) -> JoinMessage | MoveMessage:
    """Parse one text frame into a typed inbound message or raise ProtocolError."""
    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise ProtocolError("invalid json") from exc
    if not isinstance(payload, dict):
        raise ProtocolError("invalid message")
    try:
        return _INBOUND_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        if any(error["type"] in _UNKNOWN_TAG_ERRORS for error in exc.errors()):
            raise ProtocolError("unknown message type") from exc
        raise ProtocolError("invalid message") from exc


def coerce_column(value: Any) -> int | None:
    """Return `value` as an integer column index, or None when it is not numeric.

    Integers, integral floats and strings holding an integer are accepted.
    Booleans and everything else are not. Range is checked by the caller.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            return None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value)
    return None


def encode_outbound(message: OutboundMessage) -> dict[str, Any]:
    """Dump an outbound model to its JSON-ready wire shape."""
    return message.model_dump(by_alias=True)


async def ws_send_message(websocket: Any, message: OutboundMessage) -> None:
    payload = encode_outbound(message)
    if hasattr(websocket, "send_json"):
        await websocket.send_json(payload)
        return
    if hasattr(websocket, "send_text"):
        await websocket.send_text(json.dumps(payload))


__all__ = [
    "ErrorMessage",
    "GameOverMessage",
    "Grid",
    "InboundMessage",
    "JoinMessage",
    "JoinedMessage",
    "MoveMessage",
    "MovedMessage",
    "OutboundMessage",
    "ProtocolError",
    "StartMessage",
    "UpdateMessage",
    "coerce_column",
    "decode_inbound",
    "encode_outbound",
    "ws_send_message",
]
