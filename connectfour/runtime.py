"""Process-wide runtime state shared by HTTP and WebSocket handlers."""

from __future__ import annotations

import logging

from connectfour.core.config import Settings
from connectfour.core.config import load_settings
from connectfour.rooms.registry import RoomRegistry

logger = logging.getLogger(__name__)

settings = load_settings()
room_registry = RoomRegistry()


def startup() -> None:
    """Reload settings and start from an empty room registry."""
    global settings, room_registry
    settings = load_settings()
    room_registry = RoomRegistry()


def shutdown() -> None:
    """Abandon every in-flight room; nothing is drained or persisted."""
    abandoned = room_registry.clear()
    if abandoned:
        logger.info("shutdown abandoned %d room(s)", abandoned)


__all__ = [
    "Settings",
    "room_registry",
    "settings",
    "shutdown",
    "startup",
]
