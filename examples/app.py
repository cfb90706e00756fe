"""Minimal example showing promptcanvas usage with Litestar.

This example builds a plain Litestar application around the promptcanvas
plugin instead of using the bundled ``promptcanvas.app`` factory.

The application will:
    - Keep shapes and chat messages in InMemoryStorage
    - Mount REST API endpoints at /api and the message bus at /ws
    - Evict the oldest shapes when a new drawing does not fit anywhere

Running the Application:
    GROQ_API_KEY=... python examples/app.py

Then visit:
    - http://127.0.0.1:8000/schema - OpenAPI documentation
    - http://127.0.0.1:8000/api/shapes - Shapes on the canvas

Example API Usage:
    # Draw a shape directly
    curl -X POST http://127.0.0.1:8000/api/shapes \\
        -H "Content-Type: application/json" \\
        -d '{"type": "circle", "x": 200, "y": 150, "radius": 25, "color": "#00FF00"}'

    # List all shapes
    curl http://127.0.0.1:8000/api/shapes

    # Clear the canvas
    curl -X DELETE http://127.0.0.1:8000/api/shapes

Chat commands ("draw a smiley", "clear the canvas") are sent over the
WebSocket as ``{"type": "chat_message", "content": "...", "appType": "canvas"}``.
"""

from __future__ import annotations

from litestar import Litestar

from promptcanvas import PromptCanvasConfig, PromptCanvasPlugin
from promptcanvas.core.config import CanvasSettings
from promptcanvas.core.types import PlacementPolicy

app = Litestar(
    plugins=[
        PromptCanvasPlugin(
            PromptCanvasConfig(
                # Use InMemoryStorage (default)
                storage=None,
                # Make room for new drawings instead of overlapping old ones
                settings=CanvasSettings(placement_policy=PlacementPolicy.EVICT_OLDEST),
                api_path="/api",
                ws_path="/ws",
            )
        )
    ],
    debug=True,
)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="127.0.0.1",
        port=8000,
        log_level="info",
    )
