"""Pytest configuration and fixtures for promptcanvas tests."""

from __future__ import annotations

import json
from typing import Any

import pytest
from litestar import Litestar
from litestar.testing import TestClient

from promptcanvas.app import create_app
from promptcanvas.core.config import CanvasSettings, OracleConfig
from promptcanvas.core.models import Circle, Rectangle, Shape
from promptcanvas.exceptions import StorageError
from promptcanvas.plugin import PromptCanvasConfig
from promptcanvas.realtime.manager import ConnectionManager
from promptcanvas.storage.memory import InMemoryStorage


class FakeOracle:
    """Oracle double answering with canned responses, in order.

    The last response is repeated once the queue runs dry. An exception
    instance in the queue is raised instead of returned.
    """

    def __init__(self, *responses: str | Exception) -> None:
        self.responses = list(responses) or [json.dumps({"action": "draw", "shapes": [], "message": "Done"})]
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def interpret_command(self, text: str, context: dict[str, Any]) -> str:
        self.calls.append((text, context))
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


class FakeTranscriber:
    """Transcriber double returning a fixed text."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.calls: list[bytes] = []

    async def transcribe(self, audio: bytes) -> str:
        self.calls.append(audio)
        return self.text


class FlakyStorage(InMemoryStorage):
    """In-memory store whose shape writes start failing after a number of successes."""

    def __init__(self, fail_after: int = 0) -> None:
        super().__init__()
        self.fail_after = fail_after
        self.writes = 0

    async def create_shape(self, shape: Shape) -> Shape:
        if self.writes >= self.fail_after:
            msg = "disk full"
            raise StorageError(msg)
        self.writes += 1
        return await super().create_shape(shape)


def oracle_reply(action: str = "draw", shapes: list[dict[str, Any]] | None = None, message: str = "Done") -> str:
    """Build a well-formed oracle answer."""
    return json.dumps({"action": action, "shapes": shapes or [], "message": message, "appType": "canvas"})


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


# Storage fixtures


@pytest.fixture
def storage() -> InMemoryStorage:
    """Create a fresh InMemoryStorage instance for each test."""
    return InMemoryStorage()


@pytest.fixture
def manager() -> ConnectionManager:
    """Create a connection manager for testing."""
    return ConnectionManager()


# Model fixtures


@pytest.fixture
def sample_circle() -> Circle:
    """Create a sample circle for testing."""
    return Circle(x=100.0, y=100.0, radius=20.0, color="#FF0000")


@pytest.fixture
def full_canvas_rect() -> Rectangle:
    """Create a rectangle covering the whole reference canvas."""
    return Rectangle(x=0.0, y=0.0, width=800.0, height=600.0)


# App and client fixtures


@pytest.fixture
def oracle() -> FakeOracle:
    """Create an oracle double with a default answer."""
    return FakeOracle(oracle_reply(shapes=[{"type": "circle", "x": 100, "y": 100, "radius": 20, "color": "#FF0000"}]))


@pytest.fixture
def transcriber() -> FakeTranscriber:
    """Create a transcriber double."""
    return FakeTranscriber("draw a circle")


@pytest.fixture
def app(storage: InMemoryStorage, oracle: FakeOracle, transcriber: FakeTranscriber) -> Litestar:
    """Create the promptcanvas app wired to test doubles."""
    config = PromptCanvasConfig(
        storage=storage,
        settings=CanvasSettings(),
        oracle_config=OracleConfig(api_key="test-key"),
        oracle=oracle,
        transcriber=transcriber,
    )
    return create_app(config)


@pytest.fixture
def client(app: Litestar) -> TestClient[Litestar]:
    """Create a test client for the app."""
    return TestClient(app=app)

