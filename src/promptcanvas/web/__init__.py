"""Web layer for promptcanvas API."""

from promptcanvas.web.controllers import ChatController, ShapeController, VoiceController
from promptcanvas.web.health import HealthController
from promptcanvas.web.router import create_router

__all__ = ["ChatController", "HealthController", "ShapeController", "VoiceController", "create_router"]
