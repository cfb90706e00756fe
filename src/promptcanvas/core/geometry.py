"""Bounding-box geometry for canvas shapes.

Every function here works on untyped shape payloads (the dictionaries the
oracle and the templates produce) as well as on persisted ``Shape`` models,
so the same code can reason about proposed and existing canvas content.
Payloads are never trusted: a missing or non-numeric field yields ``None``
rather than an exception.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from promptcanvas.core.models import Shape
from promptcanvas.core.types import ShapeType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

DEFAULT_OVERLAP_MARGIN = 10.0


@dataclass(frozen=True)
class BBox:
    """Axis-aligned bounding box.

    Attributes:
        min_x: Left edge.
        min_y: Top edge.
        max_x: Right edge.
        max_y: Bottom edge.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        """Horizontal extent of the box."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Vertical extent of the box."""
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        """Centre point of the box."""
        return self.min_x + self.width / 2, self.min_y + self.height / 2

    def to_dict(self) -> dict[str, float]:
        """Convert to the camelCase wire representation."""
        return {"minX": self.min_x, "minY": self.min_y, "maxX": self.max_x, "maxY": self.max_y}


def is_number(value: Any) -> bool:
    """Return True for finite ints and floats, excluding bools."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def as_payload(shape: Shape | Mapping[str, Any]) -> Mapping[str, Any]:
    """Return a wire-style mapping for either a model or a raw payload."""
    if isinstance(shape, Shape):
        return {"type": shape.shape_type.value, **shape.geometry()}
    return shape


def _numbers(payload: Mapping[str, Any], *keys: str) -> list[float] | None:
    values = [payload.get(key) for key in keys]
    if all(is_number(v) for v in values):
        return values  # type: ignore[return-value]
    return None


def bounds_of(shape: Shape | Mapping[str, Any]) -> BBox | None:
    """Compute the bounding box of a single shape.

    Args:
        shape: A shape model or an untyped shape payload.

    Returns:
        The bounding box, or None when the type is unknown or a required
        field is missing or not a number.
    """
    payload = as_payload(shape)
    shape_type = ShapeType.parse(payload.get("type"))

    if shape_type in (ShapeType.CIRCLE, ShapeType.STAR):
        values = _numbers(payload, "x", "y", "radius")
        if values is None:
            return None
        x, y, r = values
        return BBox(x - r, y - r, x + r, y + r)

    if shape_type in (ShapeType.RECTANGLE, ShapeType.TRIANGLE):
        values = _numbers(payload, "x", "y", "width", "height")
        if values is None:
            return None
        x, y, w, h = values
        return BBox(x, y, x + w, y + h)

    if shape_type == ShapeType.LINE:
        values = _numbers(payload, "x", "y", "x2", "y2")
        if values is None:
            return None
        x, y, x2, y2 = values
        return BBox(min(x, x2), min(y, y2), max(x, x2), max(y, y2))

    return None


def union_bounds(shapes: Iterable[Shape | Mapping[str, Any]]) -> BBox | None:
    """Compute the bounding box enclosing every measurable shape of a group.

    Members without a bounding box are ignored.

    Args:
        shapes: The shape group.

    Returns:
        The enclosing box, or None if no member has a bounding box.
    """
    boxes = [box for box in (bounds_of(s) for s in shapes) if box is not None]
    if not boxes:
        return None
    return BBox(
        min(b.min_x for b in boxes),
        min(b.min_y for b in boxes),
        max(b.max_x for b in boxes),
        max(b.max_y for b in boxes),
    )


def translate(shapes: Iterable[Mapping[str, Any]], dx: float, dy: float) -> list[dict[str, Any]]:
    """Return copies of the payloads shifted by ``dx, dy``.

    Only coordinate fields that are already numbers are moved.
    """
    moved = []
    for shape in shapes:
        copy = dict(shape)
        for key, delta in (("x", dx), ("y", dy), ("x2", dx), ("y2", dy)):
            if is_number(copy.get(key)):
                copy[key] += delta
        moved.append(copy)
    return moved


def boxes_overlap(a: BBox, b: BBox, margin: float = DEFAULT_OVERLAP_MARGIN) -> bool:
    """Check whether two boxes overlap once ``a`` is grown by ``margin``.

    Boxes closer than the margin count as overlapping.
    """
    return not (
        a.max_x + margin < b.min_x
        or a.min_x - margin > b.max_x
        or a.max_y + margin < b.min_y
        or a.min_y - margin > b.max_y
    )
