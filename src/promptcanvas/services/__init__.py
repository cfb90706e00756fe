"""Business logic services for promptcanvas."""

from promptcanvas.services.canvas import CanvasService
from promptcanvas.services.commands import CommandService
from promptcanvas.services.oracle import GroqOracle, OracleProtocol, summarize_canvas
from promptcanvas.services.transcription import GroqTranscriber, TranscriberProtocol

__all__ = [
    "CanvasService",
    "CommandService",
    "GroqOracle",
    "GroqTranscriber",
    "OracleProtocol",
    "TranscriberProtocol",
    "summarize_canvas",
]
