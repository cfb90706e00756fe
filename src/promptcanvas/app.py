"""Main Litestar application for promptcanvas.

This module provides the main application factory and configured app instance
for running promptcanvas as a standalone application.
"""

from __future__ import annotations

import os

from litestar import Litestar
from litestar.openapi import OpenAPIConfig
from litestar.openapi.plugins import ScalarRenderPlugin, SwaggerRenderPlugin

from promptcanvas import __version__
from promptcanvas.cli import PromptCanvasCLIPlugin
from promptcanvas.core.error_handling import get_exception_handlers
from promptcanvas.core.logging import CorrelationIdMiddleware, RequestLoggingMiddleware, configure_logging
from promptcanvas.plugin import PromptCanvasConfig, PromptCanvasPlugin
from promptcanvas.web.health import HealthController


def create_app(
    config: PromptCanvasConfig | None = None,
    *,
    debug: bool = False,
    json_logs: bool = False,
) -> Litestar:
    """Create and configure the Litestar application.

    Args:
        config: Plugin configuration. Defaults are read from the environment.
        debug: Whether to enable debug mode.
        json_logs: Whether to output logs as JSON (for production).

    Returns:
        Configured Litestar application instance.
    """
    configure_logging(debug=debug, json_logs=json_logs)

    return Litestar(
        route_handlers=[HealthController],
        plugins=[PromptCanvasPlugin(config or PromptCanvasConfig()), PromptCanvasCLIPlugin()],
        debug=debug,
        middleware=[CorrelationIdMiddleware, RequestLoggingMiddleware],
        exception_handlers=get_exception_handlers(),
        openapi_config=OpenAPIConfig(
            title="promptcanvas API",
            version=__version__,
            description="Shared drawing canvas driven by natural-language commands",
            path="/schema",
            render_plugins=[ScalarRenderPlugin(path="/"), SwaggerRenderPlugin(path="/swagger")],
            use_handler_docstrings=True,
        ),
    )


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("true", "1", "yes")


# Default application instance for uvicorn
# Use PROMPTCANVAS_DEBUG=true for dev mode, defaults to False (production)
app = create_app(debug=_env_flag("PROMPTCANVAS_DEBUG"), json_logs=_env_flag("PROMPTCANVAS_JSON_LOGS"))
