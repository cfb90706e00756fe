"""Storage protocol definitions for promptcanvas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from promptcanvas.core.models import ChatMessage, Shape


@runtime_checkable
class ShapeStoreProtocol(Protocol):
    """The record-store contract the command pipeline depends on.

    The store is authoritative: callers re-read it before every placement
    decision instead of caching its contents.
    """

    async def get_shapes(self) -> list[Shape]:
        """List all shapes on the canvas.

        Returns:
            Every shape, oldest first.

        Raises:
            StorageError: If the list operation fails.
        """
        ...

    async def create_shape(self, shape: Shape) -> Shape:
        """Persist a new shape.

        Args:
            shape: The shape to store; any id it carries is replaced.

        Returns:
            The stored shape with its assigned id.

        Raises:
            StorageError: If the shape cannot be stored.
        """
        ...

    async def delete_shape(self, shape_id: str) -> bool:
        """Delete a single shape.

        Args:
            shape_id: Identifier of the shape to delete.

        Returns:
            True if the shape was deleted, False if it did not exist.

        Raises:
            StorageError: If the delete operation fails.
        """
        ...

    async def clear_shapes(self) -> bool:
        """Remove every shape from the canvas.

        Clearing an empty canvas is a no-op, not an error.

        Returns:
            True once the canvas is empty.

        Raises:
            StorageError: If the clear operation fails.
        """
        ...


@runtime_checkable
class StorageProtocol(ShapeStoreProtocol, Protocol):
    """Full storage interface: the shape store plus the chat log."""

    async def get_shape(self, shape_id: str) -> Shape | None:
        """Retrieve a shape by id.

        Args:
            shape_id: Identifier of the shape.

        Returns:
            The shape if found, None otherwise.
        """
        ...

    async def list_chat_messages(self, app_type: str | None = None) -> list[ChatMessage]:
        """List chat messages, oldest first.

        Args:
            app_type: Only return messages for this mini-app when given.

        Returns:
            The matching messages.
        """
        ...

    async def create_chat_message(self, message: ChatMessage) -> ChatMessage:
        """Append a message to the chat log.

        Args:
            message: The message to store.

        Returns:
            The stored message.
        """
        ...

    async def clear_chat_messages(self, app_type: str | None = None) -> bool:
        """Remove chat messages.

        Args:
            app_type: Only remove messages for this mini-app when given.

        Returns:
            True once the messages are removed.
        """
        ...
