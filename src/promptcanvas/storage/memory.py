"""In-memory storage implementation for promptcanvas."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from promptcanvas.core.models import ChatMessage, Shape


class InMemoryStorage:
    """Asyncio-safe in-memory record store.

    Shapes are kept in an insertion-ordered dictionary so "oldest first" is
    simply iteration order. Copies are handed out to prevent external
    modification.

    Note:
        All data is lost when the application stops. This storage is suitable
        for development, testing, or ephemeral sessions.

    Attributes:
        _shapes: Shapes keyed by id, in insertion order.
        _messages: Chat log, oldest first.
        _lock: Asyncio lock guarding both collections.
    """

    def __init__(self) -> None:
        """Initialize the storage with an empty canvas and chat log."""
        self._shapes: dict[str, Shape] = {}
        self._messages: list[ChatMessage] = []
        self._lock = asyncio.Lock()

    async def get_shapes(self) -> list[Shape]:
        """List all shapes, oldest first.

        Returns:
            Copies of every stored shape.
        """
        async with self._lock:
            return [replace(shape) for shape in self._shapes.values()]

    async def get_shape(self, shape_id: str) -> Shape | None:
        """Retrieve a shape by id.

        Args:
            shape_id: Identifier of the shape.

        Returns:
            A copy of the shape if found, None otherwise.
        """
        async with self._lock:
            shape = self._shapes.get(shape_id)
            return replace(shape) if shape else None

    async def create_shape(self, shape: Shape) -> Shape:
        """Store a new shape under a fresh id.

        Args:
            shape: The shape to store.

        Returns:
            A copy of the stored shape, id assigned.
        """
        async with self._lock:
            stored = replace(shape, id=str(uuid4()))
            self._shapes[stored.id] = stored
            return replace(stored)

    async def delete_shape(self, shape_id: str) -> bool:
        """Delete a single shape.

        Args:
            shape_id: Identifier of the shape to delete.

        Returns:
            True if the shape was deleted, False if it did not exist.
        """
        async with self._lock:
            return self._shapes.pop(shape_id, None) is not None

    async def clear_shapes(self) -> bool:
        """Remove every shape.

        Returns:
            Always True; clearing an empty canvas is a no-op.
        """
        async with self._lock:
            self._shapes.clear()
            return True

    async def list_chat_messages(self, app_type: str | None = None) -> list[ChatMessage]:
        """List chat messages, oldest first.

        Args:
            app_type: Only return messages for this mini-app when given.

        Returns:
            Copies of the matching messages.
        """
        async with self._lock:
            return [replace(m) for m in self._messages if app_type is None or m.app_type == app_type]

    async def create_chat_message(self, message: ChatMessage) -> ChatMessage:
        """Append a message to the chat log.

        Args:
            message: The message to store.

        Returns:
            A copy of the stored message.
        """
        async with self._lock:
            self._messages.append(replace(message))
            return replace(message)

    async def clear_chat_messages(self, app_type: str | None = None) -> bool:
        """Remove chat messages.

        Args:
            app_type: Only remove messages for this mini-app when given.

        Returns:
            Always True.
        """
        async with self._lock:
            if app_type is None:
                self._messages.clear()
            else:
                self._messages = [m for m in self._messages if m.app_type != app_type]
            return True
