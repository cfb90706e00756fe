"""Custom exceptions for promptcanvas."""

from __future__ import annotations


class PromptCanvasError(Exception):
    """Base exception class for all promptcanvas errors."""


class ShapeNotFoundError(PromptCanvasError):
    """Raised when a shape with the specified ID cannot be found.

    Attributes:
        shape_id: The ID of the shape that was not found.
    """

    def __init__(self, shape_id: str) -> None:
        """Initialize the exception with the shape ID.

        Args:
            shape_id: The ID of the shape that was not found.
        """
        self.shape_id = shape_id
        super().__init__(f"Shape with ID {shape_id} not found")


class InvalidShapeError(PromptCanvasError):
    """Raised when a shape payload fails validation.

    Attributes:
        field: Name of the offending field, if a single field is to blame.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize the exception with a custom message.

        Args:
            message: Description of why the shape is invalid.
            field: Name of the offending field.
        """
        self.field = field
        super().__init__(message)


class StorageError(PromptCanvasError):
    """Raised when a record store operation fails."""


class OracleError(PromptCanvasError):
    """Raised when the command-interpretation service cannot be reached or answers badly."""


class CommandExecutionError(PromptCanvasError):
    """Raised when a command has to be aborted part way through.

    Attributes:
        events: Outbound events for mutations that were applied before the failure.
    """

    def __init__(self, message: str, events: list[dict] | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Description of the failure.
            events: Events for mutations already applied to the store.
        """
        self.events = events or []
        super().__init__(message)
