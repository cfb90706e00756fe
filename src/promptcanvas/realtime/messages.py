"""WebSocket message types and schemas for real-time communication."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from promptcanvas.commands.interpretation import CommandInterpretation
    from promptcanvas.core.models import ChatMessage, Shape


class MessageType(str, Enum):
    """Types of WebSocket messages."""

    # Client -> Server
    CHAT_MESSAGE = "chat_message"
    VOICE_DATA = "voice_data"
    GET_STATE = "get_state"

    # Server -> Client (CHAT_MESSAGE is also used outbound)
    INITIAL_STATE = "initial_state"
    SHAPES_UPDATED = "shapes_updated"
    SHAPE_CREATED = "shape_created"
    SHAPE_DELETED = "shape_deleted"
    SHAPES_CLEARED = "shapes_cleared"
    COMMAND_EXECUTED = "command_executed"
    VOICE_TRANSCRIBED = "voice_transcribed"
    ERROR = "error"


@dataclass
class InitialStateMessage:
    """Full canvas snapshot sent to a client when it connects or asks for state."""

    shapes: list[Shape]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": MessageType.INITIAL_STATE.value,
            "timestamp": self.timestamp.isoformat(),
            "shapes": [s.to_dict() for s in self.shapes],
            # modules load their own chat history over REST
            "messages": [],
        }


@dataclass
class ShapesUpdatedMessage:
    """Full shape list broadcast after a bulk change."""

    shapes: list[Shape]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": MessageType.SHAPES_UPDATED.value,
            "timestamp": self.timestamp.isoformat(),
            "shapes": [s.to_dict() for s in self.shapes],
        }


@dataclass
class ShapeCreatedMessage:
    """Delta announcing a newly persisted shape."""

    shape: Shape
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": MessageType.SHAPE_CREATED.value,
            "timestamp": self.timestamp.isoformat(),
            "shape": self.shape.to_dict(),
        }


@dataclass
class ShapeDeletedMessage:
    """Delta announcing a removed shape."""

    shape_id: str
    reason: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        result = {
            "type": MessageType.SHAPE_DELETED.value,
            "timestamp": self.timestamp.isoformat(),
            "id": self.shape_id,
        }
        if self.reason:
            result["reason"] = self.reason
        return result


@dataclass
class ShapesClearedMessage:
    """Delta announcing that the canvas was emptied."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": MessageType.SHAPES_CLEARED.value,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class ChatBroadcastMessage:
    """A chat log entry pushed to every client."""

    message: ChatMessage
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": MessageType.CHAT_MESSAGE.value,
            "timestamp": self.timestamp.isoformat(),
            "message": self.message.to_dict(),
        }


@dataclass
class CommandExecutedMessage:
    """Announces the interpretation of a command once it has been applied."""

    interpretation: CommandInterpretation
    template_name: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        result = {
            "type": MessageType.COMMAND_EXECUTED.value,
            "timestamp": self.timestamp.isoformat(),
            "interpretation": self.interpretation.to_dict(),
        }
        if self.template_name:
            result["templateName"] = self.template_name
        return result


@dataclass
class VoiceTranscribedMessage:
    """Tells the speaking client what was heard."""

    text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": MessageType.VOICE_TRANSCRIBED.value,
            "timestamp": self.timestamp.isoformat(),
            "text": self.text,
        }


@dataclass
class ErrorMessage:
    """Message for error responses."""

    code: str
    message: str
    details: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        result = {
            "type": MessageType.ERROR.value,
            "timestamp": self.timestamp.isoformat(),
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result
