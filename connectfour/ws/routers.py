"""WebSocket route handler for game connections."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi import WebSocket
from fastapi import WebSocketDisconnect

import connectfour.runtime as runtime

from .broadcast import deliver
from .session import ConnectionSession
from .session import handle_disconnect
from .session import handle_frame

router = APIRouter()


async def receive_frame(websocket: Any) -> str | bytes:
    """Wait for the next text or binary frame; raise on disconnect."""
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code", 1000))
    text = message.get("text")
    if text is not None:
        return text
    return message.get("bytes") or b""


@router.websocket("/")
@router.websocket("/ws")
async def ws_game(websocket: WebSocket) -> None:
    """Game websocket: join/move frames in, state broadcasts out."""
    await websocket.accept()
    registry = runtime.room_registry
    session = ConnectionSession(websocket)
    try:
        while True:
            raw = await receive_frame(websocket)
            await deliver(handle_frame(registry, session, raw))
    except WebSocketDisconnect:
        return
    finally:
        await deliver(handle_disconnect(registry, session))
