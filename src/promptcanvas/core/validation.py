"""Strict validation of untyped shape payloads into Shape models."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from promptcanvas.core.geometry import is_number
from promptcanvas.core.models import DEFAULT_COLOR, DEFAULT_STROKE_WIDTH, SHAPE_CLASSES, Shape
from promptcanvas.core.types import ShapeType
from promptcanvas.exceptions import InvalidShapeError

if TYPE_CHECKING:
    from collections.abc import Mapping

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")

MIN_STROKE_WIDTH = 1.0
MAX_STROKE_WIDTH = 20.0

REQUIRED_FIELDS: dict[ShapeType, tuple[str, ...]] = {
    ShapeType.RECTANGLE: ("x", "y", "width", "height"),
    ShapeType.TRIANGLE: ("x", "y", "width", "height"),
    ShapeType.CIRCLE: ("x", "y", "radius"),
    ShapeType.STAR: ("x", "y", "radius"),
    ShapeType.LINE: ("x", "y", "x2", "y2"),
}

POSITIVE_FIELDS = frozenset({"width", "height", "radius"})

CURVE_STYLE = "curve"


def parse_shape_type(value: Any) -> ShapeType:
    """Validate enum membership of a payload's ``type``.

    Raises:
        InvalidShapeError: If the type is missing or not one of the known variants.
    """
    if not isinstance(value, str):
        raise InvalidShapeError("Missing or invalid shape type", field="type")
    shape_type = ShapeType.parse(value)
    if shape_type is None:
        raise InvalidShapeError(f"Unknown shape type: {value}", field="type")
    return shape_type


def canonical_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of an untyped payload with its ``type`` spelled canonically.

    Unknown types are left as they are for validation to reject.
    """
    copy = dict(payload)
    shape_type = ShapeType.parse(copy.get("type"))
    if shape_type is not None:
        copy["type"] = shape_type.value
    return copy


def coerce_color(value: Any) -> str:
    """Return a valid hex color, defaulting when absent.

    Raises:
        InvalidShapeError: If a color is given but is not ``#RRGGBB``.
    """
    if value is None or value == "":
        return DEFAULT_COLOR
    if not isinstance(value, str) or not HEX_COLOR.match(value):
        raise InvalidShapeError(f"Invalid color: {value!r}", field="color")
    return value


def coerce_stroke_width(value: Any) -> float:
    """Return a stroke width clamped to the allowed range, defaulting when absent.

    Raises:
        InvalidShapeError: If a stroke width is given but is not a finite number.
    """
    if value is None or value == 0:
        return DEFAULT_STROKE_WIDTH
    if not is_number(value):
        raise InvalidShapeError(f"Invalid stroke width: {value!r}", field="strokeWidth")
    return float(min(MAX_STROKE_WIDTH, max(MIN_STROKE_WIDTH, value)))


def shape_from_payload(payload: Mapping[str, Any]) -> Shape:
    """Validate a raw shape payload and build the matching Shape model.

    Missing ``color``/``strokeWidth`` are filled with defaults. Unknown keys
    (``id``, ``selected``, ...) are ignored; the store assigns identifiers.

    Args:
        payload: Untyped shape mapping, camelCase keys.

    Returns:
        A Shape model of the right variant, without an id.

    Raises:
        InvalidShapeError: If the payload does not describe a valid shape.
    """
    if not isinstance(payload, dict):
        raise InvalidShapeError("Shape payload must be an object")

    shape_type = parse_shape_type(payload.get("type"))

    fields: dict[str, Any] = {}
    for name in REQUIRED_FIELDS[shape_type]:
        value = payload.get(name)
        if not is_number(value):
            raise InvalidShapeError(f"{shape_type.value} requires numeric '{name}'", field=name)
        if name in POSITIVE_FIELDS and value <= 0:
            raise InvalidShapeError(f"'{name}' must be greater than zero", field=name)
        fields[name] = float(value)

    if shape_type == ShapeType.LINE and payload.get("style") == CURVE_STYLE:
        fields["style"] = CURVE_STYLE

    shape_cls = SHAPE_CLASSES[shape_type]
    return shape_cls(
        color=coerce_color(payload.get("color")),
        stroke_width=coerce_stroke_width(payload.get("strokeWidth")),
        **fields,
    )
