"""Rescaling of shape groups into the canonical bounding box."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from promptcanvas.core.geometry import BBox, is_number, union_bounds
from promptcanvas.core.models import DEFAULT_COLOR, DEFAULT_STROKE_WIDTH

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_TARGET = (300.0, 300.0)
DEFAULT_CENTER = (400.0, 300.0)

MIN_SIZE = 1.0

COORDINATE_KEYS = (("x", "y"), ("x2", "y2"))
SIZE_KEYS = ("width", "height", "radius")


def compute_scale(bounds: BBox, target: tuple[float, float]) -> float:
    """Uniform factor that fits ``bounds`` inside ``target`` without distortion.

    Extents are floored at one unit so degenerate groups (a single vertical
    line) do not divide by zero.
    """
    target_w, target_h = target
    width = max(MIN_SIZE, bounds.width)
    height = max(MIN_SIZE, bounds.height)
    return min(target_w / width, target_h / height)


def normalize_group(
    shapes: Sequence[dict[str, Any]],
    target: tuple[float, float] = DEFAULT_TARGET,
    center: tuple[float, float] = DEFAULT_CENTER,
) -> list[dict[str, Any]]:
    """Rescale and recentre a shape group.

    Every coordinate is mapped through ``(c - bounds_center) * scale +
    center``, size fields are scaled by the same factor (floored at one) and
    missing ``color``/``strokeWidth`` are filled in.

    Args:
        shapes: Untyped shape payloads.
        target: Canonical box ``(width, height)`` to fit into.
        center: Destination centre ``(x, y)``.

    Returns:
        New payloads, or the input unchanged when no member has a bounding box.
    """
    bounds = union_bounds(shapes)
    if bounds is None:
        return list(shapes)

    scale = compute_scale(bounds, target)
    width = max(MIN_SIZE, bounds.width)
    height = max(MIN_SIZE, bounds.height)
    origin_x = bounds.min_x + width / 2
    origin_y = bounds.min_y + height / 2
    dest_x, dest_y = center

    normalized = []
    for shape in shapes:
        copy = dict(shape)
        copy["color"] = copy.get("color") or DEFAULT_COLOR
        copy["strokeWidth"] = copy.get("strokeWidth") or DEFAULT_STROKE_WIDTH
        for x_key, y_key in COORDINATE_KEYS:
            if is_number(copy.get(x_key)) and is_number(copy.get(y_key)):
                copy[x_key] = (copy[x_key] - origin_x) * scale + dest_x
                copy[y_key] = (copy[y_key] - origin_y) * scale + dest_y
        for key in SIZE_KEYS:
            # non-positive sizes are left for validation to reject
            if is_number(copy.get(key)) and copy[key] > 0:
                copy[key] = max(MIN_SIZE, copy[key] * scale)
        normalized.append(copy)
    return normalized
