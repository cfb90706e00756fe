"""Core domain models for the promptcanvas canvas."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from promptcanvas.core.types import Sender, ShapeType

DEFAULT_COLOR = "#000000"
DEFAULT_STROKE_WIDTH = 2.0

STAR_POINTS = 5
STAR_INNER_RATIO = 0.4


@dataclass
class Shape:
    """Base class for all canvas shapes.

    Attributes:
        id: Identifier assigned by the record store on persistence.
        shape_type: Variant tag of the shape.
        color: Stroke color in ``#RRGGBB`` format.
        stroke_width: Width of the outline in pixels.
        created_at: Timestamp when the shape was created.
    """

    id: str | None = None
    shape_type: ShapeType = field(init=False)
    color: str = DEFAULT_COLOR
    stroke_width: float = DEFAULT_STROKE_WIDTH
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def geometry(self) -> dict[str, Any]:
        """Return the variant-specific numeric fields, keyed by wire name."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase wire representation."""
        result: dict[str, Any] = {"id": self.id, "type": self.shape_type.value}
        result.update(self.geometry())
        result["color"] = self.color
        result["strokeWidth"] = self.stroke_width
        result["createdAt"] = self.created_at.isoformat()
        return result


@dataclass
class Rectangle(Shape):
    """Axis-aligned rectangle anchored at its top-left corner."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def __post_init__(self) -> None:
        """Set the shape type to RECTANGLE after initialization."""
        self.shape_type = ShapeType.RECTANGLE

    def geometry(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass
class Triangle(Rectangle):
    """Isosceles triangle inscribed in the ``x, y, width, height`` box.

    The apex sits at the middle of the top edge, the base runs along the
    bottom edge.
    """

    def __post_init__(self) -> None:
        """Set the shape type to TRIANGLE after initialization."""
        self.shape_type = ShapeType.TRIANGLE

    def vertices(self) -> list[tuple[float, float]]:
        """Return bottom-left, apex and bottom-right vertices."""
        return [
            (self.x, self.y + self.height),
            (self.x + self.width / 2, self.y),
            (self.x + self.width, self.y + self.height),
        ]


@dataclass
class Circle(Shape):
    """Circle centred on ``x, y``."""

    x: float = 0.0
    y: float = 0.0
    radius: float = 0.0

    def __post_init__(self) -> None:
        """Set the shape type to CIRCLE after initialization."""
        self.shape_type = ShapeType.CIRCLE

    def geometry(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "radius": self.radius}


@dataclass
class Star(Circle):
    """Five-pointed star centred on ``x, y`` with outer radius ``radius``."""

    def __post_init__(self) -> None:
        """Set the shape type to STAR after initialization."""
        self.shape_type = ShapeType.STAR

    def points(self) -> list[tuple[float, float]]:
        """Return the alternating outer/inner vertices, starting straight up."""
        inner = self.radius * STAR_INNER_RATIO
        vertices = []
        for i in range(STAR_POINTS * 2):
            r = self.radius if i % 2 == 0 else inner
            angle = -math.pi / 2 + i * math.pi / STAR_POINTS
            vertices.append((self.x + r * math.cos(angle), self.y + r * math.sin(angle)))
        return vertices


@dataclass
class Line(Shape):
    """Straight or curved segment from ``x, y`` to ``x2, y2``.

    Attributes:
        style: ``"curve"`` to render a quadratic bezier, None for a straight line.
    """

    x: float = 0.0
    y: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    style: str | None = None

    def __post_init__(self) -> None:
        """Set the shape type to LINE after initialization."""
        self.shape_type = ShapeType.LINE

    def geometry(self) -> dict[str, Any]:
        result: dict[str, Any] = {"x": self.x, "y": self.y, "x2": self.x2, "y2": self.y2}
        if self.style:
            result["style"] = self.style
        return result

    def control_point(self) -> tuple[float, float]:
        """Return the bezier control point for a curved line.

        The point is offset from the chord midpoint, perpendicular to the
        chord, by a quarter of the chord length. For straight lines this is
        simply the midpoint.
        """
        mx = (self.x + self.x2) / 2
        my = (self.y + self.y2) / 2
        if self.style != "curve":
            return mx, my
        dx = self.x2 - self.x
        dy = self.y2 - self.y
        length = math.hypot(dx, dy)
        if length == 0:
            return mx, my
        offset = length / 4
        return mx - dy / length * offset, my + dx / length * offset


SHAPE_CLASSES: dict[ShapeType, type[Shape]] = {
    ShapeType.RECTANGLE: Rectangle,
    ShapeType.TRIANGLE: Triangle,
    ShapeType.CIRCLE: Circle,
    ShapeType.STAR: Star,
    ShapeType.LINE: Line,
}


@dataclass
class ChatMessage:
    """A single entry of the command chat log.

    Attributes:
        content: Message text.
        sender: Who wrote the message.
        app_type: Mini-app the message belongs to.
        id: Unique identifier of the message.
        timestamp: When the message was recorded.
    """

    content: str
    sender: Sender = Sender.USER
    app_type: str = "canvas"
    id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "content": self.content,
            "sender": self.sender.value,
            "appType": self.app_type,
            "timestamp": self.timestamp.isoformat(),
        }
