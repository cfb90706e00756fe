"""Recovery of JSON objects from raw oracle responses.

The oracle is asked for a single JSON object but in practice wraps it in
markdown fences, adds commentary, leaves ``//`` comments and trailing commas
behind, or emits one object per sub-action back to back. Extraction here is
best effort and never raises.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

import structlog

from promptcanvas.commands.interpretation import ACTION_SEPARATOR, CommandInterpretation
from promptcanvas.core.types import CanvasAction

logger = structlog.get_logger(__name__)

FENCE = re.compile(r"```[A-Za-z0-9_-]*[ \t]*")

PARSE_ERROR = "Could not parse command structure"
UNAVAILABLE_MESSAGE = "Sorry, I could not process your command at the moment."

DEFAULT_ACTIONS = {"canvas": CanvasAction.DRAW.value}

Rewrite = Callable[[str, int], tuple[str, int] | None]


def rewrite_outside_strings(text: str, rewrite: Rewrite) -> str:
    """Apply ``rewrite`` at every position that is not inside a string literal.

    Quotes only open a string literal inside braces, so stray quotes in
    surrounding prose cannot swallow the JSON that follows.

    Args:
        text: Response text.
        rewrite: Called with the text and a position; returns the replacement
            and the position to resume from, or None to copy the character.

    Returns:
        The rewritten text; string literals are copied through untouched.
    """
    out: list[str] = []
    depth = 0
    in_string = False
    escaped = False
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if in_string:
            out.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            i += 1
            continue

        if char == '"' and depth > 0:
            in_string = True
        elif char in "{}":
            depth = depth + 1 if char == "{" else max(0, depth - 1)
        else:
            rewritten = rewrite(text, i)
            if rewritten is not None:
                replacement, i = rewritten
                out.append(replacement)
                continue
        out.append(char)
        i += 1
    return "".join(out)


def _fence(text: str, i: int) -> tuple[str, int] | None:
    match = FENCE.match(text, i)
    return ("", match.end()) if match else None


def _line_comment(text: str, i: int) -> tuple[str, int] | None:
    if not text.startswith("//", i):
        return None
    newline = text.find("\n", i)
    return "", len(text) if newline == -1 else newline


def _trailing_comma(text: str, i: int) -> tuple[str, int] | None:
    if text[i] != ",":
        return None
    j = i + 1
    while j < len(text) and text[j].isspace():
        j += 1
    return ("", i + 1) if j < len(text) and text[j] in "]}" else None


def strip_fences(text: str) -> str:
    """Remove triple-backtick fences and the language tag that may follow them."""
    return rewrite_outside_strings(text, _fence)


def strip_comments(text: str) -> str:
    """Remove ``//`` line comments outside string literals."""
    return rewrite_outside_strings(text, _line_comment)


def strip_trailing_commas(text: str) -> str:
    """Remove commas that directly precede ``]`` or ``}`` outside string literals."""
    return rewrite_outside_strings(text, _trailing_comma)


def strip_noise(text: str) -> str:
    """Remove comments, then the trailing commas they may have been hiding."""
    return strip_trailing_commas(strip_comments(text))


def carve_objects(text: str) -> list[str]:
    """Cut out every top-level balanced ``{...}`` substring, in order.

    Braces inside string literals do not count. An object left open at the
    end of the text is discarded.
    """
    objects: list[str] = []
    depth = 0
    start = -1
    in_string = False
    escaped = False
    for i, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            if depth > 0:
                in_string = True
        elif char == "{":
            if depth == 0:
                start = i
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                objects.append(text[start : i + 1])
    return objects


def extract_json_objects(raw: str) -> list[dict[str, Any]]:
    """Recover every parseable JSON object from a raw oracle response.

    Args:
        raw: The oracle's raw text.

    Returns:
        Parsed objects in order of appearance, possibly empty.
    """
    if not raw:
        return []
    cleaned = strip_noise(strip_fences(raw))
    parsed = []
    for candidate in carve_objects(cleaned):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            logger.debug("Discarding unparseable object", length=len(candidate))
            continue
        if isinstance(value, dict):
            parsed.append(value)
    return parsed


def merge_objects(
    objects: list[dict[str, Any]],
    default_action: str,
    app_type: str = "canvas",
) -> CommandInterpretation:
    """Merge several parsed objects into one interpretation.

    Actions are joined with ``"|"`` in order, shape arrays are concatenated
    in order and the last non-empty message wins.
    """
    actions: list[str] = []
    shapes: list[dict[str, Any]] = []
    message = ""
    for obj in objects:
        action = obj.get("action")
        if isinstance(action, str) and action.strip():
            actions.append(action.strip())
        obj_shapes = obj.get("shapes")
        if isinstance(obj_shapes, list):
            shapes.extend(s for s in obj_shapes if isinstance(s, dict))
        obj_message = obj.get("message")
        if isinstance(obj_message, str) and obj_message.strip():
            message = obj_message
    return CommandInterpretation(
        action=ACTION_SEPARATOR.join(actions) or default_action,
        shapes=shapes,
        message=message or "Command processed",
        app_type=app_type,
    )


def default_action_for(app_type: str) -> str:
    """Return the fallback action for a mini-app."""
    return DEFAULT_ACTIONS.get(app_type, CanvasAction.DRAW.value)


def degraded_interpretation(message: str, error: str, app_type: str = "canvas") -> CommandInterpretation:
    """Build the interpretation used when the oracle output cannot be used.

    Args:
        message: Text shown to the user in place of the oracle's reply.
        error: Why the interpretation is degraded.
        app_type: Mini-app the command targets.
    """
    return CommandInterpretation(
        action=default_action_for(app_type),
        message=message,
        error=error,
        app_type=app_type,
    )


def interpret_response(raw: str, app_type: str = "canvas") -> CommandInterpretation:
    """Turn a raw oracle response into a command interpretation.

    Args:
        raw: The oracle's raw text.
        app_type: Mini-app the command targets; selects the fallback action.

    Returns:
        The merged interpretation, or a degraded one carrying the raw text as
        its message when nothing could be parsed.
    """
    objects = extract_json_objects(raw)
    if not objects:
        logger.warning("No JSON object in oracle response", length=len(raw or ""))
        return degraded_interpretation((raw or "").strip() or UNAVAILABLE_MESSAGE, PARSE_ERROR, app_type)
    if len(objects) > 1:
        logger.info("Merging multiple oracle objects", count=len(objects))
    return merge_objects(objects, default_action_for(app_type), app_type)
