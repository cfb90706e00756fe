"""Data Transfer Objects (DTOs) for the promptcanvas API."""

from __future__ import annotations

from dataclasses import dataclass

from litestar.dto import DataclassDTO, DTOConfig

from promptcanvas.core.models import ChatMessage
from promptcanvas.core.types import Sender

# Chat DTOs


@dataclass
class CreateChatMessageDTO:
    """DTO for appending to the chat log.

    Attributes:
        content: Message text.
        sender: Who wrote the message.
        app_type: Mini-app the message belongs to (``appType`` on the wire).
    """

    content: str = ""
    sender: Sender = Sender.USER
    app_type: str = "canvas"

    def to_model(self) -> ChatMessage:
        """Build the chat log entry."""
        return ChatMessage(content=self.content, sender=self.sender, app_type=self.app_type)


class CreateChatMessageRequest(DataclassDTO[CreateChatMessageDTO]):
    """Reads ``CreateChatMessageDTO`` from camelCase JSON."""

    config = DTOConfig(rename_strategy="camel")


# Voice DTOs


@dataclass
class TranscriptionResponseDTO:
    """DTO for voice transcription responses.

    Attributes:
        transcription: The recognized text, empty when nothing was understood.
    """

    transcription: str
