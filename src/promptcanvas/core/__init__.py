"""Core domain models for promptcanvas."""

from promptcanvas.core.geometry import BBox, bounds_of, union_bounds
from promptcanvas.core.models import ChatMessage, Circle, Line, Rectangle, Shape, Star, Triangle
from promptcanvas.core.types import CanvasAction, PlacementPolicy, Sender, ShapeType
from promptcanvas.core.validation import shape_from_payload

__all__ = [
    "BBox",
    "CanvasAction",
    "ChatMessage",
    "Circle",
    "Line",
    "PlacementPolicy",
    "Rectangle",
    "Sender",
    "Shape",
    "ShapeType",
    "Star",
    "Triangle",
    "bounds_of",
    "shape_from_payload",
    "union_bounds",
]
