"""Command line extensions for the Litestar CLI."""

from __future__ import annotations

from promptcanvas.cli.canvas import PromptCanvasCLIPlugin, canvas_group, run_preview

__all__ = ["PromptCanvasCLIPlugin", "canvas_group", "run_preview"]
