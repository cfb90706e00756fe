"""Runtime configuration for promptcanvas.

Settings are plain dataclasses whose defaults come from environment
variables, so they can be built with no arguments in production and with
explicit values in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from promptcanvas.core.types import PlacementPolicy

GROQ_CHAT_URL = "https://api.groq.com/openai/v1/chat/completions"
GROQ_TRANSCRIPTION_URL = "https://api.groq.com/openai/v1/audio/transcriptions"


def _env_api_key() -> str:
    return os.getenv("GROQ_API_KEY") or os.getenv("GROQ_KEY", "")


@dataclass
class OracleConfig:
    """Configuration for the hosted language model and transcription endpoints.

    Environment variables:
        GROQ_API_KEY: API key (``GROQ_KEY`` is accepted as a fallback)
        PROMPTCANVAS_ORACLE_URL: Chat completions endpoint
        PROMPTCANVAS_ORACLE_MODEL: Model used to interpret commands
        PROMPTCANVAS_TRANSCRIPTION_URL: Audio transcription endpoint
        PROMPTCANVAS_TRANSCRIPTION_MODEL: Model used for speech-to-text
        PROMPTCANVAS_ORACLE_TIMEOUT: HTTP timeout in seconds
    """

    api_key: str = field(default_factory=_env_api_key)
    chat_url: str = field(default_factory=lambda: os.getenv("PROMPTCANVAS_ORACLE_URL", GROQ_CHAT_URL))
    model: str = field(default_factory=lambda: os.getenv("PROMPTCANVAS_ORACLE_MODEL", "llama-3.1-8b-instant"))
    transcription_url: str = field(
        default_factory=lambda: os.getenv("PROMPTCANVAS_TRANSCRIPTION_URL", GROQ_TRANSCRIPTION_URL)
    )
    transcription_model: str = field(
        default_factory=lambda: os.getenv("PROMPTCANVAS_TRANSCRIPTION_MODEL", "whisper-large-v3-turbo")
    )
    timeout: float = field(default_factory=lambda: float(os.getenv("PROMPTCANVAS_ORACLE_TIMEOUT", "30")))
    temperature: float = 0.3
    max_tokens: int = 1500

    @property
    def enabled(self) -> bool:
        """Check if an API key is configured."""
        return bool(self.api_key)


@dataclass
class CanvasSettings:
    """Geometry settings for command placement.

    Attributes:
        width: Reference canvas width the oracle and templates draw on.
        height: Reference canvas height.
        target_width: Width of the canonical box groups are rescaled into.
        target_height: Height of the canonical box.
        center_x: X of the point normalized groups are centred on.
        center_y: Y of the point normalized groups are centred on.
        margin: Extra distance under which two boxes count as overlapping.
        placement_policy: Behaviour when no free candidate position exists.
    """

    width: float = 800.0
    height: float = 600.0
    target_width: float = 300.0
    target_height: float = 300.0
    center_x: float = 400.0
    center_y: float = 300.0
    margin: float = 10.0
    placement_policy: PlacementPolicy = PlacementPolicy.NO_EVICTION

    @classmethod
    def from_env(cls) -> CanvasSettings:
        """Create settings from environment variables.

        Environment variables:
            PROMPTCANVAS_PLACEMENT_POLICY: ``no_eviction`` (default) or ``evict_oldest``.

        Returns:
            CanvasSettings configured from environment.
        """
        policy = os.environ.get("PROMPTCANVAS_PLACEMENT_POLICY", PlacementPolicy.NO_EVICTION.value)
        return cls(placement_policy=PlacementPolicy(policy.strip().lower()))

    @property
    def target(self) -> tuple[float, float]:
        """Canonical box as ``(width, height)``."""
        return self.target_width, self.target_height

    @property
    def center(self) -> tuple[float, float]:
        """Destination centre as ``(x, y)``."""
        return self.center_x, self.center_y
