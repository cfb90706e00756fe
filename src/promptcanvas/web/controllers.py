"""Litestar controllers for promptcanvas API endpoints."""

from __future__ import annotations

from typing import Annotated, Any, ClassVar

from litestar import Controller, delete, get, post
from litestar.datastructures import UploadFile
from litestar.enums import RequestEncodingType
from litestar.exceptions import ClientException, ValidationException
from litestar.params import Body
from litestar.status_codes import HTTP_200_OK, HTTP_204_NO_CONTENT

from promptcanvas.services.canvas import CanvasService
from promptcanvas.services.transcription import ALLOWED_AUDIO_TYPES, MAX_AUDIO_BYTES, TranscriberProtocol
from promptcanvas.web.dto import CreateChatMessageDTO, CreateChatMessageRequest, TranscriptionResponseDTO


class ShapeController(Controller):
    """Controller for direct manipulation of the shared canvas.

    Every change made here is broadcast on the message bus exactly like the
    changes made by chat commands.
    """

    path = "/shapes"
    tags: ClassVar[list[str]] = ["Shapes"]

    @get("/")
    async def list_shapes(self, service: CanvasService) -> list[dict[str, Any]]:
        """List all shapes on the canvas, oldest first.

        Args:
            service: The canvas service instance (injected).

        Returns:
            The shapes in wire format.
        """
        shapes = await service.list_shapes()
        return [s.to_dict() for s in shapes]

    @post("/")
    async def create_shape(self, data: dict[str, Any], service: CanvasService) -> dict[str, Any]:
        """Draw a shape on the canvas.

        Args:
            data: The shape payload (``type``, geometry, optional ``color`` and ``strokeWidth``).
            service: The canvas service instance (injected).

        Returns:
            The stored shape.

        Raises:
            InvalidShapeError: If the payload is not a valid shape.
            StorageError: If the add operation fails.
        """
        shape = await service.create_shape(data)
        return shape.to_dict()

    @delete("/{shape_id:str}", status_code=HTTP_204_NO_CONTENT)
    async def delete_shape(self, shape_id: str, service: CanvasService) -> None:
        """Delete a shape from the canvas.

        Args:
            shape_id: Identifier of the shape to delete.
            service: The canvas service instance (injected).

        Raises:
            ShapeNotFoundError: If the shape does not exist.
            StorageError: If the delete operation fails.
        """
        await service.delete_shape(shape_id)

    @delete("/", status_code=HTTP_204_NO_CONTENT)
    async def clear_shapes(self, service: CanvasService) -> None:
        """Clear the canvas.

        Args:
            service: The canvas service instance (injected).
        """
        await service.clear_shapes()


class ChatController(Controller):
    """Controller for the command chat log."""

    path = "/chat-messages"
    tags: ClassVar[list[str]] = ["Chat"]

    @get("/")
    async def list_messages(self, service: CanvasService, app_type: str | None = None) -> list[dict[str, Any]]:
        """List chat messages, oldest first.

        Args:
            service: The canvas service instance (injected).
            app_type: Only return messages for this mini-app.

        Returns:
            The chat log in wire format.
        """
        messages = await service.list_chat_messages(app_type)
        return [m.to_dict() for m in messages]

    @post("/", dto=CreateChatMessageRequest, return_dto=None)
    async def create_message(self, data: CreateChatMessageDTO, service: CanvasService) -> dict[str, Any]:
        """Append a message to the chat log.

        Args:
            data: The message to store.
            service: The canvas service instance (injected).

        Returns:
            The stored message.

        Raises:
            ValidationException: If the message has no content.
        """
        if not data.content.strip():
            raise ValidationException(
                detail="Message content is required",
                extra=[{"key": "content", "message": "Message content is required"}],
            )
        message = await service.create_chat_message(data.to_model())
        return message.to_dict()

    @delete("/", status_code=HTTP_204_NO_CONTENT)
    async def clear_messages(self, service: CanvasService, app_type: str | None = None) -> None:
        """Clear the chat log.

        Args:
            service: The canvas service instance (injected).
            app_type: Only clear messages for this mini-app.
        """
        await service.clear_chat_messages(app_type)


class VoiceController(Controller):
    """Controller for voice transcription."""

    path = "/voice-transcribe"
    tags: ClassVar[list[str]] = ["Voice"]

    @post("/", status_code=HTTP_200_OK)
    async def transcribe(
        self,
        data: Annotated[dict[str, UploadFile], Body(media_type=RequestEncodingType.MULTI_PART)],
        transcriber: TranscriberProtocol,
    ) -> TranscriptionResponseDTO:
        """Transcribe an uploaded audio clip.

        Args:
            data: Multipart form; the clip is expected under ``audio``.
            transcriber: The transcription service (injected).

        Returns:
            The transcription, empty when nothing was recognized.

        Raises:
            ClientException: If no clip was sent, its type is not allowed or it is too large.
        """
        upload = data.get("audio")
        if not isinstance(upload, UploadFile):
            raise ClientException(detail="No audio file provided")
        if upload.content_type not in ALLOWED_AUDIO_TYPES:
            raise ClientException(detail="Invalid file type. Only audio files are allowed.")

        audio = await upload.read()
        if len(audio) > MAX_AUDIO_BYTES:
            raise ClientException(detail="File too large. Maximum size is 5MB.")

        return TranscriptionResponseDTO(transcription=await transcriber.transcribe(audio))
