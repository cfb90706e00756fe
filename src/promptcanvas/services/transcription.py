"""Speech-to-text client for voice commands."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx
import structlog

from promptcanvas.core.config import OracleConfig

logger = structlog.get_logger(__name__)

ALLOWED_AUDIO_TYPES = frozenset({"audio/wav", "audio/mpeg", "audio/mp4", "audio/x-m4a"})
MAX_AUDIO_BYTES = 5 * 1024 * 1024


@runtime_checkable
class TranscriberProtocol(Protocol):
    """Audio-to-text service."""

    async def transcribe(self, audio: bytes) -> str:
        """Transcribe an audio clip.

        Args:
            audio: Raw audio bytes (WAV).

        Returns:
            The transcription, or an empty string on any failure.
        """
        ...


class GroqTranscriber:
    """Transcriber backed by an OpenAI-compatible ``audio/transcriptions`` endpoint."""

    def __init__(self, config: OracleConfig | None = None, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the transcriber.

        Args:
            config: Endpoint configuration. Loaded from the environment if not provided.
            transport: Optional httpx transport, used by tests.
        """
        self._config = config or OracleConfig()
        self._transport = transport

    async def transcribe(self, audio: bytes) -> str:
        """Transcribe an audio clip; failures yield an empty string.

        Args:
            audio: Raw audio bytes (WAV).

        Returns:
            The transcribed text, stripped, or ``""``.
        """
        if not audio:
            return ""

        files = {"file": ("audio.wav", audio, "audio/wav")}
        data = {"model": self._config.transcription_model}
        headers = {"Authorization": f"Bearer {self._config.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport) as client:
                resp = await client.post(self._config.transcription_url, files=files, data=data, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Transcription request failed", error=str(e), error_type=type(e).__name__)
            return ""

        if resp.status_code != 200:
            logger.warning("Transcription returned an error", status=resp.status_code)
            return ""

        try:
            body = resp.json()
        except ValueError:
            logger.warning("Transcription response was not JSON")
            return ""

        text = body.get("text") if isinstance(body, dict) else None
        if not isinstance(text, str):
            return ""

        return text.strip()
