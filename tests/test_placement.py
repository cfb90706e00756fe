"""Tests for the collision-avoiding placement engine."""

from __future__ import annotations

import pytest

from promptcanvas.commands.placement import PlacementEngine, candidate_centers
from promptcanvas.core.geometry import bounds_of, boxes_overlap
from promptcanvas.core.models import Circle, Rectangle
from promptcanvas.core.types import PlacementPolicy

GROUP = [{"type": "circle", "x": 400, "y": 300, "radius": 50}]


class TestCandidateCenters:
    """Tests for the candidate grid."""

    def test_grid_order(self) -> None:
        """Sixteen centres, rows outer and columns inner."""
        centers = candidate_centers(800, 600)

        assert len(centers) == 16
        assert centers[0] == (160, 120)
        assert centers[1] == (320, 120)
        assert centers[4] == (160, 240)
        assert centers[-1] == (640, 480)

    def test_engine_exposes_candidates(self) -> None:
        """Test candidates follow the configured canvas size."""
        engine = PlacementEngine(400, 300)
        assert engine.candidates[0] == (80, 60)


class TestPlacementEngine:
    """Tests for PlacementEngine.place."""

    def test_empty_canvas_uses_first_candidate(self) -> None:
        """With nothing on the canvas the first candidate wins."""
        placement = PlacementEngine().place(GROUP, [])

        assert placement.placed
        assert placement.candidate == (160, 120)
        assert placement.shapes[0]["x"] == 160
        assert placement.shapes[0]["y"] == 120
        assert placement.evicted == []

    def test_skips_occupied_candidate(self) -> None:
        """The group moves on to the next free candidate."""
        occupied = Circle(id="c1", x=160, y=120, radius=20)
        placement = PlacementEngine().place(GROUP, [occupied])

        assert placement.candidate == (320, 120)

    def test_result_does_not_overlap_existing(self) -> None:
        """Placed members keep the margin to every existing shape."""
        existing = [
            Circle(id="a", x=160, y=120, radius=30),
            Rectangle(id="b", x=280, y=80, width=100, height=100),
        ]
        engine = PlacementEngine()
        placement = engine.place(GROUP, existing)

        assert placement.placed
        for shape in placement.shapes:
            box = bounds_of(shape)
            assert box is not None
            for other in existing:
                other_box = bounds_of(other)
                assert other_box is not None
                assert not boxes_overlap(box, other_box, engine.margin)

    def test_shape_over_centre_pushes_group_aside(self) -> None:
        """A shape covering the middle of the canvas sends a small group to a free outer cell."""
        centre = Rectangle(id="centre", x=100, y=60, width=600, height=360)
        small = [{"type": "circle", "x": 400, "y": 300, "radius": 20}]
        engine = PlacementEngine()

        placement = engine.place(small, [centre])

        assert placement.candidate == (160, 480)
        assert placement.evicted == []
        box = bounds_of(placement.shapes[0])
        centre_box = bounds_of(centre)
        assert box is not None
        assert centre_box is not None
        assert not boxes_overlap(box, centre_box, engine.margin)

    def test_input_group_untouched(self) -> None:
        """Placement works on copies."""
        group = [dict(GROUP[0])]
        PlacementEngine().place(group, [])

        assert group == GROUP

    def test_full_canvas_without_eviction(self, full_canvas_rect: Rectangle) -> None:
        """When nothing fits the group comes back unmoved."""
        full_canvas_rect.id = "full"
        placement = PlacementEngine(policy=PlacementPolicy.NO_EVICTION).place(GROUP, [full_canvas_rect])

        assert not placement.placed
        assert placement.candidate is None
        assert placement.shapes == GROUP
        assert placement.evicted == []

    def test_evict_oldest_until_free(self) -> None:
        """Oldest shapes are evicted one by one until a candidate is free."""
        oldest = Rectangle(id="a", x=0, y=0, width=800, height=600)
        older = Rectangle(id="b", x=0, y=0, width=800, height=600)
        newest = Circle(id="c", x=640, y=480, radius=10)
        placement = PlacementEngine(policy=PlacementPolicy.EVICT_OLDEST).place(GROUP, [oldest, older, newest])

        assert [s.id for s in placement.evicted] == ["a", "b"]
        assert placement.candidate == (160, 120)

    def test_unmeasurable_group_passes_through(self) -> None:
        """Groups without a bounding box are left alone."""
        group = [{"type": "blob"}]
        placement = PlacementEngine().place(group, [Circle(id="c", x=160, y=120, radius=20)])

        assert placement.shapes == group
        assert not placement.placed

    @pytest.mark.parametrize("margin", [0, 10, 40])
    def test_occupied_candidate_skipped_for_any_margin(self, margin: float) -> None:
        """A candidate under an existing shape is never chosen."""
        existing = [Circle(id="c", x=160, y=120, radius=20)]
        small = [{"type": "circle", "x": 0, "y": 0, "radius": 10}]
        placement = PlacementEngine(margin=margin).place(small, existing)

        assert placement.candidate == (320, 120)
