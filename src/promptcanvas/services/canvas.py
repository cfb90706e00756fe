"""Canvas service for direct manipulation of the shared canvas."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import structlog

from promptcanvas.core.validation import shape_from_payload
from promptcanvas.exceptions import ShapeNotFoundError
from promptcanvas.realtime.messages import ShapeCreatedMessage, ShapeDeletedMessage, ShapesClearedMessage

if TYPE_CHECKING:
    from promptcanvas.core.models import ChatMessage, Shape
    from promptcanvas.realtime.manager import ConnectionManager
    from promptcanvas.storage.base import StorageProtocol

logger = structlog.get_logger(__name__)


class CanvasService:
    """Business logic for the shared canvas.

    Wraps the record store with validation and broadcasting, and owns the
    canvas write lock. Every mutation, whether it comes from a REST call or
    from a chat command, is applied and announced while holding the lock, so
    observers never see two writers interleave.

    Attributes:
        write_lock: Serializes canvas mutations together with their broadcast.
    """

    def __init__(self, storage: StorageProtocol, connection_manager: ConnectionManager) -> None:
        """Initialize the canvas service.

        Args:
            storage: Storage backend implementing StorageProtocol.
            connection_manager: Bus used to announce changes.
        """
        self._storage = storage
        self._manager = connection_manager
        self.write_lock = asyncio.Lock()

    @property
    def storage(self) -> StorageProtocol:
        """The underlying record store."""
        return self._storage

    async def list_shapes(self) -> list[Shape]:
        """List all shapes on the canvas, oldest first.

        Raises:
            StorageError: If the list operation fails.
        """
        return await self._storage.get_shapes()

    async def create_shape(self, payload: dict[str, Any]) -> Shape:
        """Validate, persist and announce a user-drawn shape.

        Args:
            payload: Untyped shape payload from the client.

        Returns:
            The stored shape.

        Raises:
            InvalidShapeError: If the payload is not a valid shape.
            StorageError: If the add operation fails.
        """
        shape = shape_from_payload(payload)
        async with self.write_lock:
            created = await self._storage.create_shape(shape)
            await self._manager.broadcast(ShapeCreatedMessage(shape=created).to_dict())
        logger.info("Shape drawn", shape_id=created.id, shape_type=created.shape_type.value)
        return created

    async def delete_shape(self, shape_id: str) -> None:
        """Delete and announce a single shape.

        Args:
            shape_id: Identifier of the shape to delete.

        Raises:
            ShapeNotFoundError: If the shape does not exist.
            StorageError: If the delete operation fails.
        """
        async with self.write_lock:
            if not await self._storage.delete_shape(shape_id):
                raise ShapeNotFoundError(shape_id)
            await self._manager.broadcast(ShapeDeletedMessage(shape_id=shape_id).to_dict())
        logger.info("Shape deleted", shape_id=shape_id)

    async def clear_shapes(self) -> None:
        """Clear the canvas and announce it.

        Raises:
            StorageError: If the clear operation fails.
        """
        async with self.write_lock:
            await self._storage.clear_shapes()
            await self._manager.broadcast(ShapesClearedMessage().to_dict())
        logger.info("Canvas cleared")

    async def list_chat_messages(self, app_type: str | None = None) -> list[ChatMessage]:
        """List the chat log, oldest first, optionally for a single mini-app."""
        return await self._storage.list_chat_messages(app_type)

    async def create_chat_message(self, message: ChatMessage) -> ChatMessage:
        """Append a message to the chat log."""
        return await self._storage.create_chat_message(message)

    async def clear_chat_messages(self, app_type: str | None = None) -> None:
        """Clear the chat log, optionally for a single mini-app only."""
        await self._storage.clear_chat_messages(app_type)
        logger.info("Chat log cleared", app_type=app_type)
