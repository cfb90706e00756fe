"""Execution of interpreted canvas commands against the record store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from promptcanvas.commands.normalizer import DEFAULT_CENTER, DEFAULT_TARGET, normalize_group
from promptcanvas.commands.placement import PlacementEngine
from promptcanvas.commands.templates import KeywordTemplateMatcher, TemplateMatcher
from promptcanvas.core.types import CanvasAction
from promptcanvas.core.validation import canonical_payload, shape_from_payload
from promptcanvas.exceptions import CommandExecutionError, InvalidShapeError, StorageError
from promptcanvas.realtime.messages import ShapeCreatedMessage, ShapeDeletedMessage, ShapesClearedMessage

if TYPE_CHECKING:
    from promptcanvas.commands.interpretation import CommandInterpretation
    from promptcanvas.core.models import Shape
    from promptcanvas.storage.base import ShapeStoreProtocol

logger = structlog.get_logger(__name__)

EVICTION_REASON = "evicted"


@dataclass
class ExecutionResult:
    """What a command did to the canvas.

    Attributes:
        actions: Sub-actions that were run, after the implicit-clear guard.
        created: Shapes persisted, in order.
        evicted: Shapes removed to make room, oldest first.
        cleared: Number of times the canvas was cleared.
        skipped: Number of proposed shapes dropped by validation.
        template_name: Template used for the last draw, if any.
        events: Outbound bus messages for every mutation, in order.
    """

    actions: list[CanvasAction] = field(default_factory=list)
    created: list[Shape] = field(default_factory=list)
    evicted: list[Shape] = field(default_factory=list)
    cleared: int = 0
    skipped: int = 0
    template_name: str | None = None
    events: list[dict[str, Any]] = field(default_factory=list)


class CommandExecutor:
    """Runs the draw / clear pipeline for one interpreted command.

    The executor owns no canvas state of its own; the store handle is
    injected and re-read before every placement decision.
    """

    def __init__(
        self,
        store: ShapeStoreProtocol,
        *,
        matcher: TemplateMatcher | None = None,
        engine: PlacementEngine | None = None,
        target: tuple[float, float] = DEFAULT_TARGET,
        center: tuple[float, float] = DEFAULT_CENTER,
    ) -> None:
        """Initialize the executor.

        Args:
            store: Record store holding the canvas.
            matcher: Template matcher, keyword based by default.
            engine: Placement engine, no-eviction 800x600 by default.
            target: Canonical box groups are rescaled into.
            center: Centre normalized groups start from.
        """
        self._store = store
        self._matcher = matcher or KeywordTemplateMatcher()
        self._engine = engine or PlacementEngine()
        self._target = target
        self._center = center

    async def execute(self, interpretation: CommandInterpretation, command: str) -> ExecutionResult:
        """Apply an interpretation to the canvas.

        Args:
            interpretation: The sanitized oracle interpretation.
            command: The user's original command text.

        Returns:
            The execution result with the events to broadcast.

        Raises:
            CommandExecutionError: If the record store fails; carries the
                events of the mutations applied before the failure.
        """
        result = ExecutionResult(actions=interpretation.without_implicit_clear(command))
        dropped = len(interpretation.actions) - len(result.actions)
        if dropped:
            logger.info("Dropped clear not requested by the user", dropped=dropped)

        try:
            for action in result.actions:
                if action == CanvasAction.DRAW:
                    await self._draw(interpretation.shapes, command, result)
                elif action in (CanvasAction.CLEAR, CanvasAction.DELETE):
                    await self._clear(result)
        except StorageError as e:
            logger.exception("Record store failed during command", applied_events=len(result.events))
            raise CommandExecutionError(str(e), events=result.events) from e

        logger.info(
            "Command executed",
            actions=[a.value for a in result.actions],
            created=len(result.created),
            evicted=len(result.evicted),
            skipped=result.skipped,
            template=result.template_name,
        )
        return result

    async def _draw(self, shapes: list[dict[str, Any]], command: str, result: ExecutionResult) -> None:
        shapes = [canonical_payload(s) for s in shapes]
        matched = self._matcher.match(command, shapes)
        if matched.applied:
            logger.info("Applied template", template=matched.template_name)
            result.template_name = matched.template_name
        if not matched.shapes:
            logger.warning("Draw requested without shapes")
            return

        group = normalize_group(matched.shapes, target=self._target, center=self._center)
        existing = await self._store.get_shapes()
        placement = self._engine.place(group, existing)

        for victim in placement.evicted:
            if victim.id is not None and await self._store.delete_shape(victim.id):
                logger.warning("Evicted oldest shape to make room", shape_id=victim.id)
                result.evicted.append(victim)
                result.events.append(ShapeDeletedMessage(shape_id=victim.id, reason=EVICTION_REASON).to_dict())

        total = len(placement.shapes)
        for index, payload in enumerate(placement.shapes):
            try:
                shape = shape_from_payload(payload)
            except InvalidShapeError as e:
                result.skipped += 1
                logger.warning("Skipping invalid shape", index=index, total=total, reason=str(e), field=e.field)
                continue
            created = await self._store.create_shape(shape)
            result.created.append(created)
            result.events.append(ShapeCreatedMessage(shape=created).to_dict())
            logger.debug("Created shape", index=index, total=total, shape_id=created.id)

    async def _clear(self, result: ExecutionResult) -> None:
        await self._store.clear_shapes()
        result.cleared += 1
        result.events.append(ShapesClearedMessage().to_dict())
        logger.info("Cleared canvas")
