"""Canned composite drawings for well-known subjects.

The oracle is unreliable at composing multi-part figures (eyes inside a
face, rays around a sun). When the command names one of these subjects the
oracle's shapes are replaced wholesale by a hand-authored group drawn on the
800x600 reference canvas.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class TemplateMatch:
    """Result of matching a command against the template catalogue.

    Attributes:
        applied: Whether a template replaced the proposed shapes.
        shapes: The shapes to draw (template or pass-through).
        template_name: Name of the matched template.
    """

    applied: bool
    shapes: list[dict[str, Any]] = field(default_factory=list)
    template_name: str | None = None


@runtime_checkable
class TemplateMatcher(Protocol):
    """Anything that can swap proposed shapes for a canned composite."""

    def match(self, command: str, shapes: list[dict[str, Any]]) -> TemplateMatch:
        """Match a command against the known subjects.

        Args:
            command: The user's command text.
            shapes: Shapes proposed by the oracle.

        Returns:
            The match result; ``shapes`` passes through when nothing matched.
        """
        ...


def smiley() -> list[dict[str, Any]]:
    return [
        {"type": "circle", "x": 300, "y": 250, "radius": 80, "color": "#FFC107", "strokeWidth": 4},
        {"type": "circle", "x": 270, "y": 220, "radius": 8, "color": "#000000", "strokeWidth": 2},
        {"type": "circle", "x": 330, "y": 220, "radius": 8, "color": "#000000", "strokeWidth": 2},
        {"type": "line", "x": 250, "y": 280, "x2": 350, "y2": 280, "color": "#000000", "strokeWidth": 3, "style": "curve"},
    ]


def sad_face() -> list[dict[str, Any]]:
    return [
        {"type": "circle", "x": 300, "y": 250, "radius": 80, "color": "#FFFFCC", "strokeWidth": 2},
        {"type": "circle", "x": 270, "y": 220, "radius": 8, "color": "#000000", "strokeWidth": 2},
        {"type": "circle", "x": 330, "y": 220, "radius": 8, "color": "#000000", "strokeWidth": 2},
        {"type": "line", "x": 250, "y": 320, "x2": 350, "y2": 320, "color": "#000000", "strokeWidth": 3, "style": "curve"},
    ]


def sun(rays: int = 8) -> list[dict[str, Any]]:
    """Sun disc with evenly spaced rays, the first one pointing north."""
    cx, cy, radius, ray_length = 300, 250, 80, 40
    shapes: list[dict[str, Any]] = [
        {"type": "circle", "x": cx, "y": cy, "radius": radius, "color": "#FFFF00", "strokeWidth": 2},
    ]
    for i in range(rays):
        angle = -math.pi / 2 + i / rays * math.pi * 2
        shapes.append(
            {
                "type": "line",
                "x": cx + (radius + 5) * math.cos(angle),
                "y": cy + (radius + 5) * math.sin(angle),
                "x2": cx + (radius + ray_length) * math.cos(angle),
                "y2": cy + (radius + ray_length) * math.sin(angle),
                "color": "#FFA500",
                "strokeWidth": 3,
            }
        )
    return shapes


def tree() -> list[dict[str, Any]]:
    return [
        # trunk
        {"type": "rectangle", "x": 290, "y": 290, "width": 20, "height": 80, "color": "#8B4513", "strokeWidth": 2},
        # foliage, bottom to top
        {"type": "triangle", "x": 240, "y": 200, "width": 120, "height": 90, "color": "#228B22", "strokeWidth": 2},
        {"type": "triangle", "x": 255, "y": 160, "width": 90, "height": 70, "color": "#2E8B57", "strokeWidth": 2},
        {"type": "triangle", "x": 270, "y": 130, "width": 60, "height": 50, "color": "#32CD32", "strokeWidth": 2},
    ]


def house() -> list[dict[str, Any]]:
    base_x, base_y, width, height, roof = 300, 280, 160, 120, 70
    return [
        {
            "type": "rectangle",
            "x": base_x - width / 2,
            "y": base_y - height,
            "width": width,
            "height": height,
            "color": "#8B4513",
            "strokeWidth": 3,
        },
        {
            "type": "triangle",
            "x": base_x - width / 2,
            "y": base_y - height - roof,
            "width": width,
            "height": roof,
            "color": "#A0522D",
            "strokeWidth": 3,
        },
        {"type": "rectangle", "x": base_x - 15, "y": base_y - 50, "width": 30, "height": 50, "color": "#654321", "strokeWidth": 2},
        {"type": "rectangle", "x": base_x - 60, "y": base_y - 90, "width": 35, "height": 35, "color": "#87CEEB", "strokeWidth": 2},
    ]


def apple() -> list[dict[str, Any]]:
    return [
        {"type": "circle", "x": 300, "y": 260, "radius": 40, "color": "#FF0000", "strokeWidth": 2},
        {"type": "line", "x": 300, "y": 220, "x2": 300, "y2": 200, "color": "#654321", "strokeWidth": 3},
        {"type": "circle", "x": 290, "y": 245, "radius": 6, "color": "#FFFFFF", "strokeWidth": 2},
        {"type": "circle", "x": 310, "y": 245, "radius": 6, "color": "#FFFFFF", "strokeWidth": 2},
    ]


@dataclass(frozen=True)
class Template:
    """A named composite and the keywords that trigger it."""

    name: str
    keywords: tuple[str, ...]
    build: Callable[[], list[dict[str, Any]]]


# Order matters: the first template with a matching keyword wins.
DEFAULT_TEMPLATES: tuple[Template, ...] = (
    Template("smiley", ("smile", "smiley"), smiley),
    Template("sad", ("sad face",), sad_face),
    Template("sun", ("sun",), sun),
    Template("tree", ("tree",), tree),
    Template("house", ("house",), house),
    Template("apple", ("apple",), apple),
)


class KeywordTemplateMatcher:
    """Template matcher driven by plain substring search over the command.

    Matching is ordered and first-match: ``"a sunny house"`` draws a sun.
    """

    def __init__(self, templates: tuple[Template, ...] = DEFAULT_TEMPLATES) -> None:
        """Initialize the matcher.

        Args:
            templates: Templates in priority order.
        """
        self._templates = templates

    @property
    def names(self) -> list[str]:
        """Names of the known templates, in priority order."""
        return [t.name for t in self._templates]

    def match(self, command: str, shapes: list[dict[str, Any]]) -> TemplateMatch:
        """Replace the proposed shapes when the command names a known subject.

        Args:
            command: The user's command text (case-insensitive).
            shapes: Shapes proposed by the oracle.

        Returns:
            A match with fresh template shapes, or the input shapes unchanged.
        """
        text = command.lower()
        for template in self._templates:
            if any(keyword in text for keyword in template.keywords):
                return TemplateMatch(applied=True, shapes=template.build(), template_name=template.name)
        return TemplateMatch(applied=False, shapes=shapes)
