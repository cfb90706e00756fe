"""Client for the hosted language model that interprets canvas commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx
import structlog

from promptcanvas.core.config import OracleConfig
from promptcanvas.exceptions import OracleError

if TYPE_CHECKING:
    from promptcanvas.core.models import Shape

logger = structlog.get_logger(__name__)

SUMMARY_LIMIT = 1000

CANVAS_SYSTEM_PROMPT = """You are an AI assistant for a drawing canvas application. \
Your job is to interpret user commands and convert them into specific drawing actions.

Available actions:
- draw: Create new shapes (rectangle, circle, line, triangle, star)
- delete: Remove all shapes
- clear: Clear the entire canvas

Current canvas has {shapes_count} shapes: {shapes_summary}

For drawing commands, provide coordinates and dimensions. Use a 800x600 canvas size as reference.
For colors, use hex format (#RRGGBB). Combine actions with "|" (for example "clear|draw") only \
when the user asks for it.

Respond with a single JSON object containing:
{{
  "action": "draw|delete|clear",
  "shapes": [array of shape objects if applicable],
  "message": "human-readable response",
  "appType": "canvas"
}}

Example shape objects:
- Rectangle: {{"type": "rectangle", "x": 100, "y": 100, "width": 50, "height": 30, "color": "#FF0000"}}
- Circle: {{"type": "circle", "x": 200, "y": 150, "radius": 25, "color": "#00FF00"}}
- Line: {{"type": "line", "x": 50, "y": 50, "x2": 150, "y2": 100, "color": "#0000FF"}}
- Curved line: {{"type": "line", "x": 50, "y": 50, "x2": 150, "y2": 50, "style": "curve"}}
- Triangle: {{"type": "triangle", "x": 300, "y": 100, "width": 80, "height": 60, "color": "#FFA500"}}
- Star: {{"type": "star", "x": 500, "y": 200, "radius": 40, "color": "#FFD700"}}"""


def summarize_canvas(shapes: list[Shape]) -> dict[str, Any]:
    """Build the cheap canvas digest sent along with a command.

    Args:
        shapes: Current canvas contents.

    Returns:
        ``{"shapesCount": n, "shapesSummary": "circle at (x,y), ..."}`` with
        the summary cut at a fixed length to bound request size.
    """
    summary = ", ".join(
        f"{s.shape_type.value} at ({round(getattr(s, 'x', 0))},{round(getattr(s, 'y', 0))})" for s in shapes
    )
    return {"shapesCount": len(shapes), "shapesSummary": summary[:SUMMARY_LIMIT]}


@runtime_checkable
class OracleProtocol(Protocol):
    """Text-to-structured-command service."""

    async def interpret_command(self, text: str, context: dict[str, Any]) -> str:
        """Ask for an interpretation of a command.

        Args:
            text: The user's command.
            context: Canvas digest from ``summarize_canvas``.

        Returns:
            The raw model response, expected (not guaranteed) to contain JSON.

        Raises:
            OracleError: If the service cannot be reached or returns no content.
        """
        ...


class GroqOracle:
    """Oracle backed by an OpenAI-compatible chat completions endpoint (Groq by default)."""

    def __init__(self, config: OracleConfig | None = None, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the oracle client.

        Args:
            config: Endpoint configuration. Loaded from the environment if not provided.
            transport: Optional httpx transport, used by tests.
        """
        self._config = config or OracleConfig()
        self._transport = transport

    def build_messages(self, text: str, context: dict[str, Any]) -> list[dict[str, str]]:
        """Build the chat messages for a command."""
        system_prompt = CANVAS_SYSTEM_PROMPT.format(
            shapes_count=context.get("shapesCount", 0),
            shapes_summary=context.get("shapesSummary", "") or "none",
        )
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": text},
        ]

    async def interpret_command(self, text: str, context: dict[str, Any]) -> str:
        """Send a command to the model and return its raw answer.

        Args:
            text: The user's command.
            context: Canvas digest from ``summarize_canvas``.

        Returns:
            The content of the first completion choice.

        Raises:
            OracleError: On transport errors, timeouts, non-200 answers or empty content.
        """
        payload = {
            "model": self._config.model,
            "messages": self.build_messages(text, context),
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self._config.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport) as client:
                resp = await client.post(self._config.chat_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Oracle request failed", error=str(e), error_type=type(e).__name__)
            msg = f"Oracle request failed: {type(e).__name__}"
            raise OracleError(msg) from e

        if resp.status_code != 200:
            logger.warning("Oracle returned an error", status=resp.status_code)
            msg = f"Oracle returned HTTP {resp.status_code}"
            raise OracleError(msg)

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            msg = "Oracle response had no completion content"
            raise OracleError(msg) from e

        if not content:
            msg = "No response from AI model"
            raise OracleError(msg)

        logger.debug("Oracle answered", model=self._config.model, length=len(content))
        return content
