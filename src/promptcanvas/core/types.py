"""Core type definitions for promptcanvas."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ShapeType(StrEnum):
    """Enumeration of shape types that can live on the canvas."""

    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    LINE = "line"
    TRIANGLE = "triangle"
    STAR = "star"

    @classmethod
    def parse(cls, value: Any) -> ShapeType | None:
        """Return the shape type named by ``value``, ignoring case and surrounding blanks."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class CanvasAction(StrEnum):
    """Enumeration of canvas sub-actions a command can request."""

    DRAW = "draw"
    CLEAR = "clear"
    DELETE = "delete"


class PlacementPolicy(StrEnum):
    """What the placement engine does when no candidate position is free."""

    NO_EVICTION = "no_eviction"
    EVICT_OLDEST = "evict_oldest"


class Sender(StrEnum):
    """Author of a chat message."""

    USER = "user"
    AI = "ai"
