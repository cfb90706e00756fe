"""Router configuration for the promptcanvas API."""

from __future__ import annotations

from litestar import Router

from promptcanvas.web.controllers import ChatController, ShapeController, VoiceController


def create_router(path: str = "/api") -> Router:
    """Create the promptcanvas API router.

    Args:
        path: The base path for all API routes. Defaults to "/api".

    Returns:
        A configured Litestar Router instance.

    Example:
        >>> router = create_router("/api/v1")
        >>> # Use the router in your Litestar app configuration
    """
    return Router(
        path=path,
        route_handlers=[ShapeController, ChatController, VoiceController],
    )
