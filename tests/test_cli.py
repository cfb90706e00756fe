"""Tests for the canvas CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner
from conftest import oracle_reply

from promptcanvas.cli import canvas_group, run_preview
from promptcanvas.core.config import CanvasSettings
from promptcanvas.core.types import PlacementPolicy


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def smiley_answer(tmp_path: Path) -> Path:
    """Write a recorded model answer for a smiley to disk."""
    path = tmp_path / "answer.txt"
    path.write_text("```json\n" + oracle_reply(action="clear|draw", message="Here is a smiley") + "\n```")
    return path


class TestRunPreview:
    """Tests for the dry-run helper."""

    async def test_recorded_answer(self) -> None:
        """Test a recorded answer is executed against an empty canvas."""
        raw = oracle_reply(shapes=[{"type": "circle", "x": 0, "y": 0, "radius": 10}])

        interpretation, result = await run_preview("draw a circle", raw)

        assert interpretation.action == "draw"
        assert result is not None
        assert len(result.created) == 1
        assert (result.created[0].x, result.created[0].y) == (160, 120)

    async def test_degraded_answer_is_not_executed(self) -> None:
        """Test prose answers stop before execution."""
        interpretation, result = await run_preview("draw a circle", "no idea")

        assert interpretation.degraded
        assert result is None

    async def test_settings_are_used(self) -> None:
        """Test the preview honours a custom canvas size."""
        raw = oracle_reply(shapes=[{"type": "circle", "x": 0, "y": 0, "radius": 10}])
        settings = CanvasSettings(width=400, height=300, placement_policy=PlacementPolicy.EVICT_OLDEST)

        _, result = await run_preview("draw a circle", raw, settings)

        assert result is not None
        assert (result.created[0].x, result.created[0].y) == (80, 60)


class TestCanvasCommands:
    """Tests for the canvas command group."""

    def test_templates(self, runner: CliRunner) -> None:
        """Test the catalogue is listed."""
        result = runner.invoke(canvas_group, ["templates"])

        assert result.exit_code == 0
        assert "smiley" in result.output
        assert "sun" in result.output

    def test_sanitize_from_stdin(self, runner: CliRunner) -> None:
        """Test a merged answer read from stdin."""
        raw = '{"action": "clear"} {"action": "draw", "shapes": [{"type": "star", "x": 1, "y": 2, "radius": 3}]}'

        result = runner.invoke(canvas_group, ["sanitize", "-"], input=raw)

        assert result.exit_code == 0
        assert "clear|draw" in result.output
        assert "star" in result.output

    def test_preview_with_recorded_answer(self, runner: CliRunner, smiley_answer: Path) -> None:
        """Test a dry run through the smiley template."""
        result = runner.invoke(canvas_group, ["preview", "draw a smiley", "--response", str(smiley_answer)])

        assert result.exit_code == 0
        assert "Template: smiley" in result.output
        assert "Created shapes (4)" in result.output

    def test_preview_without_key(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the preview refuses to call the oracle without a key."""
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        monkeypatch.delenv("GROQ_KEY", raising=False)

        result = runner.invoke(canvas_group, ["preview", "draw a smiley"])

        assert result.exit_code == 1
        assert "GROQ_API_KEY" in result.output
