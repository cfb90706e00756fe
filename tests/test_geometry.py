"""Tests for shape models and bounding-box geometry."""

from __future__ import annotations

import math

import pytest

from promptcanvas.core.geometry import BBox, bounds_of, boxes_overlap, is_number, translate, union_bounds
from promptcanvas.core.models import Circle, Line, Rectangle, Star, Triangle
from promptcanvas.core.types import ShapeType


class TestShapeModels:
    """Tests for the shape dataclasses."""

    def test_variants_set_their_type(self) -> None:
        """Each variant tags itself after initialization."""
        assert Rectangle().shape_type == ShapeType.RECTANGLE
        assert Triangle().shape_type == ShapeType.TRIANGLE
        assert Circle().shape_type == ShapeType.CIRCLE
        assert Star().shape_type == ShapeType.STAR
        assert Line().shape_type == ShapeType.LINE

    def test_to_dict_uses_wire_names(self) -> None:
        """Test serialization to the camelCase wire format."""
        rect = Rectangle(id="r1", x=10, y=20, width=30, height=40, color="#00FF00", stroke_width=3)
        data = rect.to_dict()

        assert data["id"] == "r1"
        assert data["type"] == "rectangle"
        assert (data["x"], data["y"], data["width"], data["height"]) == (10, 20, 30, 40)
        assert data["color"] == "#00FF00"
        assert data["strokeWidth"] == 3
        assert "createdAt" in data

    def test_line_style_only_serialized_when_set(self) -> None:
        """A straight line carries no style key."""
        assert "style" not in Line(x=0, y=0, x2=10, y2=0).to_dict()
        assert Line(x=0, y=0, x2=10, y2=0, style="curve").to_dict()["style"] == "curve"

    def test_triangle_vertices(self) -> None:
        """Apex on top centre, base along the bottom edge."""
        tri = Triangle(x=0, y=0, width=100, height=50)
        assert tri.vertices() == [(0, 50), (50, 0), (100, 50)]

    def test_star_points(self) -> None:
        """Star alternates outer and inner radius, first point straight up."""
        star = Star(x=0, y=0, radius=10)
        points = star.points()

        assert len(points) == 10
        assert points[0] == pytest.approx((0, -10))
        assert math.hypot(*points[1]) == pytest.approx(4)

    def test_curve_control_point_is_offset(self) -> None:
        """A curved line bends away from its chord midpoint."""
        straight = Line(x=0, y=0, x2=100, y2=0)
        curved = Line(x=0, y=0, x2=100, y2=0, style="curve")

        assert straight.control_point() == (50, 0)
        assert curved.control_point() == pytest.approx((50, 25))


class TestBoundsOf:
    """Tests for bounds_of."""

    def test_circle(self) -> None:
        """Circle bounds extend one radius in every direction."""
        box = bounds_of({"type": "circle", "x": 100, "y": 80, "radius": 20})
        assert box == BBox(80, 60, 120, 100)

    def test_star_uses_outer_radius(self) -> None:
        """Star bounds are those of its outer circle."""
        assert bounds_of({"type": "star", "x": 0, "y": 0, "radius": 5}) == BBox(-5, -5, 5, 5)

    @pytest.mark.parametrize("shape_type", ["rectangle", "triangle"])
    def test_box_shapes(self, shape_type: str) -> None:
        """Rectangles and triangles are anchored at the top-left corner."""
        box = bounds_of({"type": shape_type, "x": 10, "y": 20, "width": 30, "height": 40})
        assert box == BBox(10, 20, 40, 60)

    def test_line_with_reversed_endpoints(self) -> None:
        """Line bounds do not depend on endpoint order."""
        box = bounds_of({"type": "line", "x": 50, "y": 90, "x2": 10, "y2": 30})
        assert box == BBox(10, 30, 50, 90)

    def test_type_spelling_is_forgiven(self) -> None:
        """Type names are matched without regard to case or surrounding blanks."""
        assert bounds_of({"type": " Circle", "x": 0, "y": 0, "radius": 5}) == BBox(-5, -5, 5, 5)

    def test_shape_model(self) -> None:
        """Persisted models are measured like payloads."""
        assert bounds_of(Circle(x=10, y=10, radius=5)) == BBox(5, 5, 15, 15)

    def test_box_contains_defining_coordinates(self) -> None:
        """The box always contains the coordinates that define the shape."""
        payload = {"type": "line", "x": -5, "y": 3, "x2": 7, "y2": -2}
        box = bounds_of(payload)
        assert box is not None
        for x, y in ((payload["x"], payload["y"]), (payload["x2"], payload["y2"])):
            assert box.min_x <= x <= box.max_x
            assert box.min_y <= y <= box.max_y

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "hexagon", "x": 0, "y": 0, "radius": 5},
            {"type": "circle", "x": 0, "y": 0},
            {"type": "circle", "x": "10", "y": 0, "radius": 5},
            {"type": "rectangle", "x": True, "y": 0, "width": 1, "height": 1},
            {"x": 0, "y": 0},
        ],
    )
    def test_unmeasurable_payloads(self, payload: dict) -> None:
        """Unknown types and missing or non-numeric fields yield None."""
        assert bounds_of(payload) is None


class TestGroupGeometry:
    """Tests for union_bounds, translate and boxes_overlap."""

    def test_union_bounds_encloses_members(self) -> None:
        """The union covers every measurable member and skips the rest."""
        group = [
            {"type": "circle", "x": 0, "y": 0, "radius": 10},
            {"type": "rectangle", "x": 50, "y": 50, "width": 20, "height": 10},
            {"type": "blob"},
        ]
        assert union_bounds(group) == BBox(-10, -10, 70, 60)

    def test_union_bounds_empty(self) -> None:
        """A group with no measurable member has no bounds."""
        assert union_bounds([]) is None
        assert union_bounds([{"type": "blob"}]) is None

    def test_translate_returns_copies(self) -> None:
        """Translation moves both endpoints and leaves the input untouched."""
        line = {"type": "line", "x": 0, "y": 0, "x2": 10, "y2": 10}
        moved = translate([line], 5, -5)

        assert moved == [{"type": "line", "x": 5, "y": -5, "x2": 15, "y2": 5}]
        assert line["x"] == 0

    def test_boxes_within_margin_overlap(self) -> None:
        """Boxes closer than the margin count as overlapping."""
        a = BBox(0, 0, 10, 10)
        assert boxes_overlap(a, BBox(15, 0, 25, 10), margin=10)
        assert not boxes_overlap(a, BBox(25, 0, 35, 10), margin=10)
        assert not boxes_overlap(a, BBox(15, 0, 25, 10), margin=0)

    def test_bbox_properties(self) -> None:
        """Test derived BBox properties."""
        box = BBox(10, 20, 50, 100)
        assert box.width == 40
        assert box.height == 80
        assert box.center == (30, 60)
        assert box.to_dict() == {"minX": 10, "minY": 20, "maxX": 50, "maxY": 100}

    def test_is_number(self) -> None:
        """Only finite real numbers count."""
        assert is_number(3)
        assert is_number(2.5)
        assert not is_number(True)
        assert not is_number(float("nan"))
        assert not is_number("1")
        assert not is_number(None)
