"""Promptcanvas: a shared drawing canvas driven by natural-language commands.

Users type (or say) things like "draw a smiley in the corner"; a hosted
language model turns the command into shapes, which are sanitized, matched
against hand-drawn templates, normalized, placed where they do not overlap
and broadcast to every connected viewer.

Key Components:
    - Core Models: Shape, Rectangle, Circle, Line, Triangle, Star, ChatMessage
    - Commands: sanitizer, template matcher, normalizer, placement engine, executor
    - Storage: InMemoryStorage, StorageProtocol (for custom backends)
    - Services: CanvasService, CommandService, GroqOracle, GroqTranscriber
    - Realtime: ConnectionManager and the WebSocket message bus
    - Plugin: PromptCanvasPlugin for Litestar integration

Quick Start:
    >>> from litestar import Litestar
    >>> from promptcanvas import PromptCanvasPlugin, PromptCanvasConfig
    >>>
    >>> app = Litestar(plugins=[PromptCanvasPlugin(PromptCanvasConfig())])
"""

from __future__ import annotations

from promptcanvas.commands import CommandExecutor, CommandInterpretation, PlacementEngine, interpret_response
from promptcanvas.core import ChatMessage, Circle, Line, Rectangle, Shape, ShapeType, Star, Triangle
from promptcanvas.exceptions import (
    CommandExecutionError,
    InvalidShapeError,
    OracleError,
    PromptCanvasError,
    ShapeNotFoundError,
    StorageError,
)
from promptcanvas.plugin import PromptCanvasConfig, PromptCanvasPlugin
from promptcanvas.realtime import ConnectionManager, MessageType
from promptcanvas.services import CanvasService, CommandService
from promptcanvas.storage import InMemoryStorage, StorageProtocol

__all__ = [
    "CanvasService",
    "ChatMessage",
    "Circle",
    "CommandExecutionError",
    "CommandExecutor",
    "CommandInterpretation",
    "CommandService",
    "ConnectionManager",
    "InMemoryStorage",
    "InvalidShapeError",
    "Line",
    "MessageType",
    "OracleError",
    "PlacementEngine",
    "PromptCanvasConfig",
    "PromptCanvasError",
    "PromptCanvasPlugin",
    "Rectangle",
    "Shape",
    "ShapeNotFoundError",
    "ShapeType",
    "Star",
    "StorageError",
    "StorageProtocol",
    "Triangle",
    "__version__",
    "interpret_response",
]

__version__ = "0.1.0"
