"""Canvas CLI commands for promptcanvas.

Adds offline helpers for inspecting the command pipeline: the template
catalogue, the sanitizer's reading of a raw model answer, and a dry run of
a whole command against an empty canvas.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import rich_click as click
from litestar.plugins import CLIPluginProtocol
from rich.console import Console
from rich.table import Table

from promptcanvas.commands.executor import CommandExecutor
from promptcanvas.commands.placement import PlacementEngine
from promptcanvas.commands.sanitizer import interpret_response
from promptcanvas.commands.templates import DEFAULT_TEMPLATES
from promptcanvas.core.config import CanvasSettings, OracleConfig
from promptcanvas.core.types import PlacementPolicy
from promptcanvas.exceptions import OracleError
from promptcanvas.services.oracle import GroqOracle, summarize_canvas
from promptcanvas.storage.memory import InMemoryStorage

if TYPE_CHECKING:
    from typing import TextIO

    from promptcanvas.commands.executor import ExecutionResult
    from promptcanvas.commands.interpretation import CommandInterpretation
    from promptcanvas.core.models import Shape

console = Console()


def _geometry(data: dict[str, Any]) -> str:
    keys = ("x", "y", "x2", "y2", "width", "height", "radius")
    return ", ".join(f"{k}={round(data[k], 1)}" for k in keys if isinstance(data.get(k), int | float))


def _shapes_table(title: str, shapes: list[dict[str, Any]]) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Geometry", style="green")
    table.add_column("Color", style="yellow")
    for index, shape in enumerate(shapes, start=1):
        table.add_row(str(index), str(shape.get("type", "?")), _geometry(shape) or "-", str(shape.get("color") or "-"))
    return table


def _print_interpretation(interpretation: CommandInterpretation) -> None:
    style = "red" if interpretation.degraded else "green"
    console.print(f"[{style}]Action:[/{style}] {interpretation.action}")
    console.print(f"[{style}]Message:[/{style}] {interpretation.message}")
    if interpretation.degraded:
        console.print(f"[red]Error:[/red] {interpretation.error}")


async def run_preview(
    command: str,
    raw: str | None = None,
    settings: CanvasSettings | None = None,
    oracle_config: OracleConfig | None = None,
) -> tuple[CommandInterpretation, ExecutionResult | None]:
    """Run a command through the pipeline against a fresh, empty canvas.

    Args:
        command: The command text.
        raw: A recorded model answer. The oracle is asked when omitted.
        settings: Placement geometry and policy.
        oracle_config: Endpoint configuration, used only when ``raw`` is omitted.

    Returns:
        The interpretation and, unless it was degraded, the execution result.

    Raises:
        OracleError: If the oracle had to be asked and failed.
    """
    settings = settings or CanvasSettings()
    storage = InMemoryStorage()
    if raw is None:
        raw = await GroqOracle(oracle_config).interpret_command(command, summarize_canvas([]))

    interpretation = interpret_response(raw)
    if interpretation.degraded:
        return interpretation, None

    executor = CommandExecutor(
        storage,
        engine=PlacementEngine(settings.width, settings.height, margin=settings.margin, policy=settings.placement_policy),
        target=settings.target,
        center=settings.center,
    )
    return interpretation, await executor.execute(interpretation, command)


@click.group(name="canvas", help="Inspect the natural-language drawing pipeline.")
def canvas_group() -> None:
    """Inspect the natural-language drawing pipeline."""


@canvas_group.command(name="templates", help="List the canned composite drawings.")
def canvas_templates() -> None:
    """List the template catalogue in matching order."""
    table = Table(title="Templates (first match wins)")
    table.add_column("Name", style="cyan")
    table.add_column("Keywords", style="green")
    table.add_column("Shapes", style="yellow", justify="right")

    for template in DEFAULT_TEMPLATES:
        table.add_row(template.name, ", ".join(template.keywords), str(len(template.build())))

    console.print(table)


@canvas_group.command(name="sanitize", help="Show how a raw model answer is read.")
@click.argument("response", type=click.File("r"))
def canvas_sanitize(response: TextIO) -> None:
    """Sanitize a recorded model answer (use '-' for stdin)."""
    interpretation = interpret_response(response.read())
    _print_interpretation(interpretation)
    if interpretation.shapes:
        console.print(_shapes_table("Proposed shapes", interpretation.shapes))


@canvas_group.command(name="preview", help="Dry-run a command against an empty canvas.")
@click.argument("command")
@click.option("--response", "-r", type=click.File("r"), default=None, help="Recorded model answer to use")
@click.option(
    "--policy",
    "-p",
    type=click.Choice([p.value for p in PlacementPolicy]),
    default=PlacementPolicy.NO_EVICTION.value,
    help="Placement policy",
)
def canvas_preview(command: str, response: TextIO | None, policy: str) -> None:
    """Run COMMAND through templates, normalization and placement without a server."""
    settings = CanvasSettings(placement_policy=PlacementPolicy(policy))
    raw = response.read() if response else None
    if raw is None and not OracleConfig().enabled:
        console.print("[red]Error: no model answer given and GROQ_API_KEY is not set.[/red]")
        console.print("Pass a recorded answer with [cyan]--response FILE[/cyan]")
        raise SystemExit(1)

    try:
        interpretation, result = asyncio.run(run_preview(command, raw, settings))
    except OracleError as e:
        console.print(f"[red]Oracle request failed: {e}[/red]")
        raise SystemExit(1) from e

    _print_interpretation(interpretation)
    if result is None:
        return

    shapes: list[Shape] = result.created
    if result.template_name:
        console.print(f"[cyan]Template:[/cyan] {result.template_name}")
    console.print(_shapes_table(f"Created shapes ({len(shapes)})", [s.to_dict() for s in shapes]))
    if result.skipped:
        console.print(f"[yellow]Skipped {result.skipped} invalid shape(s)[/yellow]")


class PromptCanvasCLIPlugin(CLIPluginProtocol):
    """CLI plugin that adds the `canvas` command group.

    Subcommands:
    - templates: List the template catalogue
    - sanitize: Show how a raw model answer is read
    - preview: Dry-run a command against an empty canvas
    """

    def on_cli_init(self, cli: click.Group) -> None:
        """Register the canvas command group."""
        cli.add_command(canvas_group)
