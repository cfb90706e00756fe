"""Collision-avoiding placement of shape groups on the shared canvas.

The engine probes a fixed 4x4 grid of candidate centres in row-major order
and keeps the first position where the translated group clears every
existing shape by the overlap margin. First fit wins, not best fit.

When nothing fits, behaviour depends on the placement policy:

* ``NO_EVICTION`` returns the group untranslated; it may overlap.
* ``EVICT_OLDEST`` drops the oldest surviving shape and rescans, repeatedly,
  trading old content for new. This is lossy on purpose; the evicted shapes
  are reported so the caller can delete and announce them.

The engine itself is pure: it never touches the record store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from promptcanvas.core.geometry import DEFAULT_OVERLAP_MARGIN, BBox, bounds_of, boxes_overlap, translate, union_bounds
from promptcanvas.core.types import PlacementPolicy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from promptcanvas.core.models import Shape

logger = structlog.get_logger(__name__)

GRID_COLUMNS = 4
GRID_ROWS = 4


@dataclass
class Placement:
    """Outcome of a placement attempt.

    Attributes:
        shapes: The group, translated onto the chosen candidate or untouched.
        candidate: The chosen candidate centre, None when no candidate fit.
        evicted: Existing shapes chosen for eviction, oldest first.
    """

    shapes: list[dict[str, Any]]
    candidate: tuple[float, float] | None = None
    evicted: list[Shape] = field(default_factory=list)

    @property
    def placed(self) -> bool:
        """True when a collision-free candidate was found."""
        return self.candidate is not None


def candidate_centers(width: float, height: float) -> list[tuple[float, float]]:
    """Evenly spaced candidate centres inside the canvas, rows outer, columns inner."""
    return [
        (c * width / (GRID_COLUMNS + 1), r * height / (GRID_ROWS + 1))
        for r in range(1, GRID_ROWS + 1)
        for c in range(1, GRID_COLUMNS + 1)
    ]


def any_overlap(group: Sequence[dict[str, Any]], existing: Sequence[BBox], margin: float) -> bool:
    """Check whether any measurable member of ``group`` overlaps an existing box."""
    for shape in group:
        box = bounds_of(shape)
        if box is None:
            continue
        if any(boxes_overlap(box, other, margin) for other in existing):
            return True
    return False


class PlacementEngine:
    """Finds a free spot for a shape group against current canvas contents."""

    def __init__(
        self,
        width: float = 800.0,
        height: float = 600.0,
        *,
        margin: float = DEFAULT_OVERLAP_MARGIN,
        policy: PlacementPolicy = PlacementPolicy.NO_EVICTION,
    ) -> None:
        """Initialize the engine.

        Args:
            width: Reference canvas width.
            height: Reference canvas height.
            margin: Distance under which boxes count as overlapping.
            policy: What to do when no candidate is free.
        """
        self.width = width
        self.height = height
        self.margin = margin
        self.policy = policy
        self._candidates = candidate_centers(width, height)

    @property
    def candidates(self) -> list[tuple[float, float]]:
        """Candidate centres in scan order."""
        return list(self._candidates)

    def scan(
        self,
        group: Sequence[dict[str, Any]],
        existing: Sequence[Shape | dict[str, Any]],
    ) -> tuple[list[dict[str, Any]], tuple[float, float]] | None:
        """Return the group moved onto the first free candidate, if any.

        Args:
            group: Shape payloads to place.
            existing: Shapes already on the canvas.

        Returns:
            ``(moved_group, candidate)`` or None when every candidate collides.
        """
        bounds = union_bounds(group)
        if bounds is None:
            return None
        existing_boxes = [box for box in (bounds_of(s) for s in existing) if box is not None]
        cx, cy = bounds.center
        for candidate in self._candidates:
            moved = translate(group, candidate[0] - cx, candidate[1] - cy)
            if not any_overlap(moved, existing_boxes, self.margin):
                return moved, candidate
        return None

    def place(self, group: Sequence[dict[str, Any]], existing: Sequence[Shape]) -> Placement:
        """Position a group so it does not overlap the existing shapes.

        Args:
            group: Normalized shape payloads.
            existing: Current canvas contents, oldest first.

        Returns:
            The placement, including any shapes to evict under ``EVICT_OLDEST``.
        """
        if union_bounds(group) is None:
            return Placement(shapes=list(group))

        remaining = list(existing)
        evicted: list[Shape] = []
        while True:
            found = self.scan(group, remaining)
            if found is not None:
                moved, candidate = found
                return Placement(shapes=moved, candidate=candidate, evicted=evicted)
            if self.policy != PlacementPolicy.EVICT_OLDEST or not remaining:
                logger.info(
                    "No free position for group, placing untranslated",
                    existing=len(remaining),
                    evicted=len(evicted),
                )
                return Placement(shapes=list(group), evicted=evicted)
            evicted.append(remaining.pop(0))
