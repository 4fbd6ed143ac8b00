"""Best-effort delivery of dispatched frames and forced closes."""

from __future__ import annotations

import logging
from typing import Any

from .protocol import OutboundMessage
from .protocol import ws_send_message
from .session import Dispatch

FORCED_CLOSE_CODE = 1000

logger = logging.getLogger(__name__)


async def deliver_best_effort(websocket: Any, message: OutboundMessage) -> bool:
    """Send one frame; a failed send is logged and dropped, never retried.

    Returns whether the send went through.
    """
    try:
        await ws_send_message(websocket, message)
    except Exception as exc:
        logger.debug("dropped %s frame: %r", message.type, exc)
        return False
    return True


async def close_best_effort(websocket: Any) -> None:
    try:
        await websocket.close(code=FORCED_CLOSE_CODE)
    except Exception as exc:
        logger.debug("forced close failed: %r", exc)


async def deliver(dispatch: Dispatch) -> None:
    """Send every frame of `dispatch` in order, then run its forced closes."""
    for websocket, message in dispatch.deliveries:
        await deliver_best_effort(websocket, message)
    for websocket in dispatch.closes:
        await close_best_effort(websocket)


__all__ = [
    "FORCED_CLOSE_CODE",
    "close_best_effort",
    "deliver",
    "deliver_best_effort",
]
