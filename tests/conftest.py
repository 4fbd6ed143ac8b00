"""Shared fixtures for connectfour tests."""

from __future__ import annotations

import pytest

from connectfour.rooms.registry import RoomRegistry


@pytest.fixture
def registry() -> RoomRegistry:
    """Fresh, empty room registry owned by one test."""
    return RoomRegistry()
