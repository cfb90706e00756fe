"""WebSocket handler for the shared canvas message bus."""

from __future__ import annotations

import base64
import binascii
import json
from typing import TYPE_CHECKING, Any

import structlog
from litestar import Router, WebSocket, websocket

from promptcanvas.realtime.messages import ErrorMessage, InitialStateMessage, MessageType, VoiceTranscribedMessage

if TYPE_CHECKING:
    from promptcanvas.realtime.manager import ConnectedClient, ConnectionManager
    from promptcanvas.services.canvas import CanvasService
    from promptcanvas.services.commands import CommandService
    from promptcanvas.services.transcription import TranscriberProtocol

logger = structlog.get_logger(__name__)

SUPPORTED_APP_TYPES = frozenset({"canvas"})


class CanvasWebSocketHandler:
    """Handler for canvas WebSocket connections.

    Every connection sees the same canvas. On connect the client receives a
    full snapshot; afterwards it receives the deltas broadcast by the
    services and may send chat commands, voice clips or state requests.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        canvas_service: CanvasService,
        command_service: CommandService,
        transcriber: TranscriberProtocol,
    ) -> None:
        """Initialize the WebSocket handler.

        Args:
            connection_manager: The connection manager instance.
            canvas_service: The canvas service instance.
            command_service: The command service instance.
            transcriber: Speech-to-text service for voice commands.
        """
        self._manager = connection_manager
        self._canvas = canvas_service
        self._commands = command_service
        self._transcriber = transcriber

    async def handle_connection(self, socket: WebSocket) -> None:
        """Handle a WebSocket connection for the canvas.

        Args:
            socket: The WebSocket connection.
        """
        await socket.accept()
        client = await self._manager.connect(socket)

        try:
            await self._send_state(socket)
            await self._receive_loop(socket, client)
        except Exception:
            logger.exception("WebSocket error", client_id=client.client_id)
        finally:
            await self._manager.disconnect(client.client_id)

    async def _receive_loop(self, socket: WebSocket, client: ConnectedClient) -> None:
        """Main receive loop for WebSocket messages.

        Args:
            socket: The WebSocket connection.
            client: The registered client.
        """
        async for message in socket.iter_data():
            try:
                data = json.loads(message)
            except (json.JSONDecodeError, UnicodeDecodeError):
                await self._send_error(socket, "invalid_json", "Invalid JSON message")
                continue

            if not isinstance(data, dict) or not data.get("type"):
                await self._send_error(socket, "missing_type", "Message type is required")
                continue

            try:
                await self._handle_message(socket, data)
            except Exception:
                logger.exception("Error handling message", message_type=data.get("type"), client_id=client.client_id)
                await self._send_error(socket, "internal_error", "Internal server error")

    async def _handle_message(self, socket: WebSocket, message: dict[str, Any]) -> None:
        """Route message to appropriate handler.

        Args:
            socket: The WebSocket connection.
            message: The parsed message.
        """
        msg_type = message.get("type")

        handlers = {
            MessageType.CHAT_MESSAGE.value: self._handle_chat_message,
            MessageType.VOICE_DATA.value: self._handle_voice_data,
            MessageType.GET_STATE.value: self._handle_get_state,
        }

        handler = handlers.get(msg_type)
        if handler:
            await handler(socket, message)
        else:
            await self._send_error(socket, "unknown_type", f"Unknown message type: {msg_type}")

    async def _handle_chat_message(self, socket: WebSocket, message: dict[str, Any]) -> None:
        content = message.get("content")
        app_type = message.get("appType") or "canvas"

        if not isinstance(content, str) or not content.strip():
            await self._send_error(socket, "invalid_message", "Message content is required")
            return
        if app_type not in SUPPORTED_APP_TYPES:
            await self._send_error(socket, "unsupported_app_type", f"Unsupported app type: {app_type}")
            return

        await self._commands.handle_chat_message(content.strip(), app_type, reply=socket.send_json)

    async def _handle_voice_data(self, socket: WebSocket, message: dict[str, Any]) -> None:
        """Transcribe a voice clip and run the transcription as a chat command.

        An empty transcription is not an error; it simply produces no command.
        """
        app_type = message.get("appType") or "canvas"
        if app_type not in SUPPORTED_APP_TYPES:
            await self._send_error(socket, "unsupported_app_type", f"Unsupported app type: {app_type}")
            return

        try:
            audio = base64.b64decode(message.get("data") or "", validate=True)
        except (binascii.Error, TypeError, ValueError):
            await self._send_error(socket, "invalid_audio", "Voice data must be base64 encoded")
            return

        text = await self._transcriber.transcribe(audio)
        if not text:
            logger.info("Empty transcription, no command run", audio_bytes=len(audio))
            return

        await socket.send_json(VoiceTranscribedMessage(text=text).to_dict())
        await self._commands.handle_chat_message(text, app_type, reply=socket.send_json)

    async def _handle_get_state(self, socket: WebSocket, message: dict[str, Any]) -> None:
        await self._send_state(socket)

    async def _send_state(self, socket: WebSocket) -> None:
        shapes = await self._canvas.list_shapes()
        await socket.send_json(InitialStateMessage(shapes=shapes).to_dict())

    async def _send_error(
        self,
        socket: WebSocket,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Send an error message to the client.

        Args:
            socket: The WebSocket connection.
            code: Error code.
            message: Error message.
            details: Additional error details.
        """
        error_msg = ErrorMessage(code=code, message=message, details=details)
        await socket.send_json(error_msg.to_dict())


def create_websocket_handler(
    path: str,
    connection_manager: ConnectionManager,
    canvas_service: CanvasService,
    command_service: CommandService,
    transcriber: TranscriberProtocol,
) -> Router:
    """Create a WebSocket router for the shared canvas.

    Args:
        path: Path the WebSocket endpoint is mounted at.
        connection_manager: The connection manager instance.
        canvas_service: The canvas service instance.
        command_service: The command service instance.
        transcriber: Speech-to-text service for voice commands.

    Returns:
        A Litestar Router with the WebSocket handler.
    """
    handler = CanvasWebSocketHandler(connection_manager, canvas_service, command_service, transcriber)

    @websocket(path="/")
    async def canvas_websocket(socket: WebSocket) -> None:
        """WebSocket endpoint for the shared canvas.

        Args:
            socket: The WebSocket connection.
        """
        await handler.handle_connection(socket)

    return Router(path=path, route_handlers=[canvas_websocket], tags=["WebSocket"])
