"""Tests for strict shape payload validation."""

from __future__ import annotations

import pytest

from promptcanvas.core.models import Circle, Line, Rectangle, Star
from promptcanvas.core.validation import canonical_payload, coerce_color, coerce_stroke_width, shape_from_payload
from promptcanvas.exceptions import InvalidShapeError


class TestShapeFromPayload:
    """Tests for shape_from_payload."""

    def test_valid_rectangle_gets_defaults(self) -> None:
        """Missing color and stroke width are filled in."""
        shape = shape_from_payload({"type": "rectangle", "x": 10, "y": 20, "width": 30, "height": 40})

        assert isinstance(shape, Rectangle)
        assert shape.id is None
        assert (shape.x, shape.y, shape.width, shape.height) == (10, 20, 30, 40)
        assert shape.color == "#000000"
        assert shape.stroke_width == 2.0

    def test_type_is_case_insensitive(self) -> None:
        """Test that the type tag is normalized."""
        shape = shape_from_payload({"type": "Star", "x": 0, "y": 0, "radius": 5})
        assert isinstance(shape, Star)

    def test_canonical_payload(self) -> None:
        """Test the type tag is rewritten on a copy and unknown types are kept."""
        payload = {"type": "CIRCLE ", "x": 1, "y": 2, "radius": 3}

        assert canonical_payload(payload) == {"type": "circle", "x": 1, "y": 2, "radius": 3}
        assert payload["type"] == "CIRCLE "
        assert canonical_payload({"type": "hexagon"}) == {"type": "hexagon"}

    def test_extra_keys_are_ignored(self) -> None:
        """Client-side keys such as id and selected do not leak into the model."""
        shape = shape_from_payload({"type": "circle", "x": 1, "y": 2, "radius": 3, "id": "x", "selected": True})
        assert isinstance(shape, Circle)
        assert shape.id is None

    def test_curve_style_kept_for_lines_only(self) -> None:
        """Only lines carry a style, and only the curve style."""
        curved = shape_from_payload({"type": "line", "x": 0, "y": 0, "x2": 10, "y2": 0, "style": "curve"})
        dashed = shape_from_payload({"type": "line", "x": 0, "y": 0, "x2": 10, "y2": 0, "style": "dashed"})

        assert isinstance(curved, Line)
        assert curved.style == "curve"
        assert dashed.style is None

    @pytest.mark.parametrize(
        ("payload", "field"),
        [
            ({"type": "hexagon", "x": 0, "y": 0}, "type"),
            ({"x": 0, "y": 0, "radius": 5}, "type"),
            ({"type": "circle", "x": 0, "y": 0}, "radius"),
            ({"type": "circle", "x": 0, "y": 0, "radius": 0}, "radius"),
            ({"type": "rectangle", "x": 0, "y": 0, "width": -5, "height": 10}, "width"),
            ({"type": "line", "x": 0, "y": 0, "x2": "10", "y2": 0}, "x2"),
            ({"type": "circle", "x": 0, "y": 0, "radius": 5, "color": "red"}, "color"),
            ({"type": "circle", "x": 0, "y": 0, "radius": 5, "strokeWidth": "thick"}, "strokeWidth"),
        ],
    )
    def test_invalid_payloads(self, payload: dict, field: str) -> None:
        """Invalid payloads are rejected with the offending field."""
        with pytest.raises(InvalidShapeError) as exc_info:
            shape_from_payload(payload)
        assert exc_info.value.field == field

    def test_non_object_payload(self) -> None:
        """Test that non-dict payloads are rejected."""
        with pytest.raises(InvalidShapeError):
            shape_from_payload(["circle", 0, 0, 5])  # type: ignore[arg-type]


class TestCoercion:
    """Tests for color and stroke width coercion."""

    def test_color_accepts_hex(self) -> None:
        """Test valid hex colors in either case."""
        assert coerce_color("#FF00aa") == "#FF00aa"

    @pytest.mark.parametrize("value", [None, ""])
    def test_color_defaults_when_absent(self, value: str | None) -> None:
        """Test that absent colors fall back to black."""
        assert coerce_color(value) == "#000000"

    @pytest.mark.parametrize("value", ["#FFF", "#GGGGGG", "FF0000", 123])
    def test_color_rejects_malformed(self, value: object) -> None:
        """Test that malformed colors are rejected."""
        with pytest.raises(InvalidShapeError):
            coerce_color(value)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, 2.0), (0, 2.0), (5, 5.0), (0.2, 1.0), (50, 20.0)],
    )
    def test_stroke_width_defaults_and_clamps(self, value: float | None, expected: float) -> None:
        """Stroke width defaults to 2 and is clamped to [1, 20]."""
        assert coerce_stroke_width(value) == expected
