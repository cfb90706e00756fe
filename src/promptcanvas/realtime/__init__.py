"""Real-time WebSocket module for promptcanvas.

This module provides the message bus for the shared canvas: connection
management and the outbound message types. The endpoint itself lives in
``promptcanvas.realtime.handler``.
"""

from __future__ import annotations

from promptcanvas.realtime.manager import ConnectedClient, ConnectionManager
from promptcanvas.realtime.messages import (
    ChatBroadcastMessage,
    CommandExecutedMessage,
    ErrorMessage,
    InitialStateMessage,
    MessageType,
    ShapeCreatedMessage,
    ShapeDeletedMessage,
    ShapesClearedMessage,
    ShapesUpdatedMessage,
    VoiceTranscribedMessage,
)

__all__ = [
    "ChatBroadcastMessage",
    "CommandExecutedMessage",
    "ConnectedClient",
    "ConnectionManager",
    "ErrorMessage",
    "InitialStateMessage",
    "MessageType",
    "ShapeCreatedMessage",
    "ShapeDeletedMessage",
    "ShapesClearedMessage",
    "ShapesUpdatedMessage",
    "VoiceTranscribedMessage",
]
