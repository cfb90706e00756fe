"""Command service: natural-language chat commands applied to the canvas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from promptcanvas.commands.sanitizer import UNAVAILABLE_MESSAGE, degraded_interpretation, interpret_response
from promptcanvas.core.logging import bind_command_context
from promptcanvas.core.models import ChatMessage
from promptcanvas.core.types import Sender
from promptcanvas.exceptions import CommandExecutionError, OracleError
from promptcanvas.realtime.messages import (
    ChatBroadcastMessage,
    CommandExecutedMessage,
    ErrorMessage,
    ShapesUpdatedMessage,
)
from promptcanvas.services.oracle import summarize_canvas

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from promptcanvas.commands.executor import CommandExecutor, ExecutionResult
    from promptcanvas.commands.interpretation import CommandInterpretation
    from promptcanvas.realtime.manager import ConnectionManager
    from promptcanvas.services.canvas import CanvasService
    from promptcanvas.services.oracle import OracleProtocol

    Reply = Callable[[dict[str, Any]], Awaitable[Any]]

logger = structlog.get_logger(__name__)


class CommandService:
    """Runs one chat command end to end.

    The oracle round trip happens outside the canvas write lock; execution
    and the broadcast of the resulting events happen inside it, so the
    deltas of two commands never interleave on the bus.
    """

    def __init__(
        self,
        canvas_service: CanvasService,
        oracle: OracleProtocol,
        executor: CommandExecutor,
        connection_manager: ConnectionManager,
    ) -> None:
        """Initialize the command service.

        Args:
            canvas_service: Canvas service owning the store and the write lock.
            oracle: Text-to-structured-command service.
            executor: Pipeline that applies interpretations to the store.
            connection_manager: Bus used to announce changes.
        """
        self._canvas = canvas_service
        self._oracle = oracle
        self._executor = executor
        self._manager = connection_manager

    async def handle_chat_message(
        self,
        content: str,
        app_type: str = "canvas",
        reply: Reply | None = None,
    ) -> CommandInterpretation:
        """Record, interpret and apply a chat command.

        Args:
            content: The user's command text.
            app_type: Mini-app the command targets.
            reply: Sends a message to the requesting client only.

        Returns:
            The interpretation the command was given.
        """
        with bind_command_context(content, app_type):
            await self._post(ChatMessage(content=content, sender=Sender.USER, app_type=app_type))

            interpretation = await self.interpret(content, app_type)
            if interpretation.degraded:
                logger.warning("Interpretation failed", error=interpretation.error)
                await self._post(ChatMessage(content=interpretation.message, sender=Sender.AI, app_type=app_type))
                await self._reply(reply, "interpretation_failed", interpretation.message, interpretation.error)
                return interpretation

            result = await self.apply(interpretation, content, reply)
            if result is None:
                return interpretation

            await self._post(ChatMessage(content=interpretation.message, sender=Sender.AI, app_type=app_type))
            await self._manager.broadcast(
                CommandExecutedMessage(interpretation=interpretation, template_name=result.template_name).to_dict()
            )
            return interpretation

    async def interpret(self, content: str, app_type: str = "canvas") -> CommandInterpretation:
        """Ask the oracle about a command; never raises.

        Args:
            content: The user's command text.
            app_type: Mini-app the command targets.

        Returns:
            The sanitized interpretation, degraded when the oracle failed.
        """
        shapes = await self._canvas.list_shapes()
        try:
            raw = await self._oracle.interpret_command(content, summarize_canvas(shapes))
        except OracleError as e:
            logger.warning("Oracle unavailable", error=str(e))
            return degraded_interpretation(UNAVAILABLE_MESSAGE, str(e), app_type)
        return interpret_response(raw, app_type)

    async def apply(
        self,
        interpretation: CommandInterpretation,
        content: str,
        reply: Reply | None = None,
    ) -> ExecutionResult | None:
        """Execute an interpretation and broadcast its events under the write lock.

        A command that evicted shapes is followed by a full snapshot so
        clients that missed a delta can resync.

        Args:
            interpretation: The interpretation to apply.
            content: The user's command text.
            reply: Sends a message to the requesting client only.

        Returns:
            The execution result, or None when the record store failed.
        """
        async with self._canvas.write_lock:
            try:
                result = await self._executor.execute(interpretation, content)
            except CommandExecutionError as e:
                for event in e.events:
                    await self._manager.broadcast(event)
                await self._reply(reply, "processing_failed", "Failed to process command", str(e))
                return None

            for event in result.events:
                await self._manager.broadcast(event)
            if result.evicted:
                shapes = await self._canvas.list_shapes()
                await self._manager.broadcast(ShapesUpdatedMessage(shapes=shapes).to_dict())
        return result

    async def _post(self, message: ChatMessage) -> None:
        stored = await self._canvas.create_chat_message(message)
        await self._manager.broadcast(ChatBroadcastMessage(message=stored).to_dict())

    async def _reply(self, reply: Reply | None, code: str, message: str, error: str | None) -> None:
        if reply is None:
            return
        details = {"error": error} if error else None
        await reply(ErrorMessage(code=code, message=message, details=details).to_dict())
