"""Tests for the chat command and canvas services."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from conftest import FakeOracle, FlakyStorage, oracle_reply

from promptcanvas.commands.executor import CommandExecutor
from promptcanvas.commands.placement import PlacementEngine
from promptcanvas.commands.sanitizer import PARSE_ERROR, UNAVAILABLE_MESSAGE
from promptcanvas.core.models import Circle, Rectangle
from promptcanvas.core.types import PlacementPolicy, Sender
from promptcanvas.exceptions import InvalidShapeError, OracleError, ShapeNotFoundError
from promptcanvas.realtime.manager import ConnectionManager
from promptcanvas.services.canvas import CanvasService
from promptcanvas.services.commands import CommandService
from promptcanvas.storage.memory import InMemoryStorage

RED_CIRCLE = {"type": "circle", "x": 100, "y": 100, "radius": 20, "color": "#FF0000"}


@pytest.fixture
def bus() -> ConnectionManager:
    """Create a connection manager whose broadcasts are recorded."""
    manager = ConnectionManager()
    manager.broadcast = AsyncMock()  # type: ignore[method-assign]
    return manager


@pytest.fixture
def canvas(storage: InMemoryStorage, bus: ConnectionManager) -> CanvasService:
    """Create a canvas service over the test store."""
    return CanvasService(storage, bus)


def build_commands(canvas: CanvasService, oracle: FakeOracle, bus: ConnectionManager) -> CommandService:
    return CommandService(canvas, oracle, CommandExecutor(canvas.storage), bus)


def broadcast_types(bus: ConnectionManager) -> list[str]:
    return [call.args[0]["type"] for call in bus.broadcast.await_args_list]  # type: ignore[attr-defined]


class TestCanvasService:
    """Tests for direct canvas manipulation."""

    async def test_create_shape_broadcasts(self, canvas: CanvasService, bus: ConnectionManager) -> None:
        """Test a user-drawn shape is stored and announced."""
        shape = await canvas.create_shape(RED_CIRCLE)

        assert shape.id is not None
        assert [s.id for s in await canvas.list_shapes()] == [shape.id]
        assert broadcast_types(bus) == ["shape_created"]

    async def test_create_invalid_shape(self, canvas: CanvasService, bus: ConnectionManager) -> None:
        """Test invalid payloads are rejected before anything is stored."""
        with pytest.raises(InvalidShapeError):
            await canvas.create_shape({"type": "circle", "x": 0, "y": 0})

        assert await canvas.list_shapes() == []
        bus.broadcast.assert_not_awaited()  # type: ignore[attr-defined]

    async def test_delete_shape(self, canvas: CanvasService, bus: ConnectionManager) -> None:
        """Test deleting announces the removed id."""
        shape = await canvas.create_shape(RED_CIRCLE)
        await canvas.delete_shape(shape.id)

        assert await canvas.list_shapes() == []
        last = bus.broadcast.await_args.args[0]  # type: ignore[attr-defined]
        assert last["type"] == "shape_deleted"
        assert last["id"] == shape.id
        assert "reason" not in last

    async def test_delete_missing_shape(self, canvas: CanvasService) -> None:
        """Test deleting an unknown id raises."""
        with pytest.raises(ShapeNotFoundError):
            await canvas.delete_shape("nope")

    async def test_clear_shapes(self, canvas: CanvasService, bus: ConnectionManager) -> None:
        """Test clearing empties the canvas and announces it."""
        await canvas.create_shape(RED_CIRCLE)
        await canvas.clear_shapes()

        assert await canvas.list_shapes() == []
        assert broadcast_types(bus) == ["shape_created", "shapes_cleared"]


class TestCommandService:
    """Tests for the end-to-end chat command flow."""

    async def test_successful_command(self, canvas: CanvasService, bus: ConnectionManager) -> None:
        """The user message, the deltas, the reply and the summary are broadcast in order."""
        oracle = FakeOracle(oracle_reply(shapes=[RED_CIRCLE], message="Drew a red circle"))
        reply = AsyncMock()

        interpretation = await build_commands(canvas, oracle, bus).handle_chat_message("draw a red circle", reply=reply)

        assert interpretation.message == "Drew a red circle"
        assert broadcast_types(bus) == ["chat_message", "shape_created", "chat_message", "command_executed"]
        reply.assert_not_awaited()

        messages = await canvas.list_chat_messages("canvas")
        assert [(m.sender, m.content) for m in messages] == [
            (Sender.USER, "draw a red circle"),
            (Sender.AI, "Drew a red circle"),
        ]
        assert len(await canvas.list_shapes()) == 1

    async def test_template_name_is_announced(self, canvas: CanvasService, bus: ConnectionManager) -> None:
        """Test the summary names the template that was applied."""
        oracle = FakeOracle(oracle_reply(action="clear|draw", message="Smile!"))

        await build_commands(canvas, oracle, bus).handle_chat_message("draw a nice smiley")

        summary = bus.broadcast.await_args.args[0]  # type: ignore[attr-defined]
        assert summary["type"] == "command_executed"
        assert summary["templateName"] == "smiley"
        assert summary["interpretation"]["action"] == "clear|draw"
        assert "shapes_cleared" not in broadcast_types(bus)

    async def test_eviction_sends_snapshot(
        self, canvas: CanvasService, bus: ConnectionManager, full_canvas_rect: Rectangle
    ) -> None:
        """A command that evicted shapes is followed by the full shape list."""
        await canvas.storage.create_shape(full_canvas_rect)
        executor = CommandExecutor(canvas.storage, engine=PlacementEngine(policy=PlacementPolicy.EVICT_OLDEST))
        commands = CommandService(canvas, FakeOracle(oracle_reply(shapes=[RED_CIRCLE])), executor, bus)

        await commands.handle_chat_message("draw a circle")

        assert broadcast_types(bus) == [
            "chat_message",
            "shape_deleted",
            "shape_created",
            "shapes_updated",
            "chat_message",
            "command_executed",
        ]
        snapshot = bus.broadcast.await_args_list[3].args[0]  # type: ignore[attr-defined]
        assert [s["type"] for s in snapshot["shapes"]] == ["circle"]

    async def test_oracle_receives_canvas_digest(
        self, canvas: CanvasService, bus: ConnectionManager, storage: InMemoryStorage, sample_circle: Circle
    ) -> None:
        """Test the oracle is told what is already on the canvas."""
        await storage.create_shape(sample_circle)
        oracle = FakeOracle(oracle_reply())

        await build_commands(canvas, oracle, bus).handle_chat_message("draw a square")

        text, context = oracle.calls[0]
        assert text == "draw a square"
        assert context == {"shapesCount": 1, "shapesSummary": "circle at (100,100)"}

    async def test_oracle_unavailable(self, canvas: CanvasService, bus: ConnectionManager) -> None:
        """An unreachable oracle leaves the canvas untouched and tells the sender."""
        oracle = FakeOracle(OracleError("Oracle request failed: ConnectTimeout"))
        reply = AsyncMock()

        interpretation = await build_commands(canvas, oracle, bus).handle_chat_message("draw a circle", reply=reply)

        assert interpretation.degraded
        assert broadcast_types(bus) == ["chat_message", "chat_message"]
        assert await canvas.list_shapes() == []

        error = reply.await_args.args[0]
        assert error["type"] == "error"
        assert error["code"] == "interpretation_failed"
        assert error["message"] == UNAVAILABLE_MESSAGE
        assert error["details"] == {"error": "Oracle request failed: ConnectTimeout"}

    async def test_unparseable_answer(self, canvas: CanvasService, bus: ConnectionManager) -> None:
        """Prose answers are shown to the user but not executed."""
        oracle = FakeOracle("I'd love to, but I only speak prose.")
        reply = AsyncMock()

        await build_commands(canvas, oracle, bus).handle_chat_message("draw a circle", reply=reply)

        messages = await canvas.list_chat_messages()
        assert messages[-1].sender == Sender.AI
        assert messages[-1].content == "I'd love to, but I only speak prose."
        assert reply.await_args.args[0]["details"] == {"error": PARSE_ERROR}
        assert await canvas.list_shapes() == []

    async def test_storage_failure(self, bus: ConnectionManager) -> None:
        """A failing store aborts the command with a processing error."""
        canvas = CanvasService(FlakyStorage(fail_after=0), bus)
        oracle = FakeOracle(oracle_reply(shapes=[RED_CIRCLE]))
        reply = AsyncMock()

        await build_commands(canvas, oracle, bus).handle_chat_message("draw a circle", reply=reply)

        assert broadcast_types(bus) == ["chat_message"]
        error = reply.await_args.args[0]
        assert error["code"] == "processing_failed"
        assert error["message"] == "Failed to process command"
        assert error["details"] == {"error": "disk full"}
        assert not canvas.write_lock.locked()

    async def test_partial_failure_broadcasts_applied_events(
        self, bus: ConnectionManager, sample_circle: Circle
    ) -> None:
        """Mutations applied before a store failure are still announced."""
        storage = FlakyStorage(fail_after=1)
        await storage.create_shape(sample_circle)
        canvas = CanvasService(storage, bus)
        oracle = FakeOracle(oracle_reply(action="clear|draw", shapes=[RED_CIRCLE]))

        await build_commands(canvas, oracle, bus).handle_chat_message("clear and draw a circle")

        assert broadcast_types(bus) == ["chat_message", "shapes_cleared"]

    async def test_without_reply_channel(self, canvas: CanvasService, bus: ConnectionManager) -> None:
        """Commands from REST-like callers without a socket still complete."""
        oracle = FakeOracle(OracleError("down"))

        interpretation = await build_commands(canvas, oracle, bus).handle_chat_message("draw a circle")

        assert interpretation.degraded
        assert broadcast_types(bus) == ["chat_message", "chat_message"]
