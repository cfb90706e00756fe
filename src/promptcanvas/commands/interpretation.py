"""Structured interpretation of a natural-language canvas command."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import structlog

from promptcanvas.core.types import CanvasAction

logger = structlog.get_logger(__name__)

ACTION_SEPARATOR = "|"

EXPLICIT_CLEAR = re.compile(r"clear|delete all|\bdelete\b")


def parse_actions(action: str) -> list[CanvasAction]:
    """Split a ``"|"``-joined compound action into known canvas actions.

    Unknown sub-actions (``modify``, ``select``, ...) are logged and dropped.

    Args:
        action: Compound action string, e.g. ``"clear|draw"``.

    Returns:
        Known actions in their original order.
    """
    actions = []
    for part in action.split(ACTION_SEPARATOR):
        name = part.strip().lower()
        if not name:
            continue
        try:
            actions.append(CanvasAction(name))
        except ValueError:
            logger.warning("Ignoring unknown canvas action", action=name)
    return actions


def requests_clear(command: str) -> bool:
    """Check whether the user's own words ask for clearing or deleting."""
    return bool(EXPLICIT_CLEAR.search(command.lower()))


@dataclass
class CommandInterpretation:
    """What the oracle made of a command.

    Attributes:
        action: Compound action exactly as merged from the oracle, ``"|"``-joined.
        shapes: Untyped shape payloads proposed by the oracle.
        message: Human-readable reply for the chat log.
        error: Set when the interpretation is degraded (oracle down or unparseable).
        app_type: Mini-app the command targets.
        actions: ``action`` parsed into known canvas actions.
    """

    action: str
    shapes: list[dict[str, Any]] = field(default_factory=list)
    message: str = ""
    error: str | None = None
    app_type: str = "canvas"
    actions: list[CanvasAction] = field(init=False)

    def __post_init__(self) -> None:
        """Parse the compound action once."""
        self.actions = parse_actions(self.action)

    @property
    def degraded(self) -> bool:
        """True when the interpretation came from a fallback path."""
        return self.error is not None

    def without_implicit_clear(self, command: str) -> list[CanvasAction]:
        """Return the actions to run, dropping ``clear`` the user never asked for.

        The oracle tends to answer decorative requests with ``clear|draw``;
        a clear only survives when the command text itself requests one.

        Args:
            command: The user's original command text.

        Returns:
            The filtered action list.
        """
        if requests_clear(command):
            return list(self.actions)
        return [a for a in self.actions if a != CanvasAction.CLEAR]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "action": self.action,
            "shapes": self.shapes,
            "message": self.message,
            "appType": self.app_type,
        }
        if self.error is not None:
            result["error"] = self.error
        return result
