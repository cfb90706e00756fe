"""Structured logging setup for promptcanvas.

Configures structlog and provides ASGI middleware that tags every log line
with a correlation id, plus a helper that tags log lines emitted while a
chat command is being executed.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator

    from litestar.types import ASGIApp, Message, Receive, Scope, Send


def configure_logging(*, debug: bool = False, json_logs: bool = False) -> None:
    """Configure structured logging for the application.

    Args:
        debug: Enable debug level logging.
        json_logs: Output logs as JSON (for production).
    """
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.extend(
            [
                structlog.processors.ExceptionPrettyPrinter(),
                structlog.dev.ConsoleRenderer(colors=True),
            ]
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def bind_command_context(command: str, app_type: str = "canvas") -> Iterator[str]:
    """Bind a fresh command id to the structlog context for the duration of a command.

    Args:
        command: The raw command text (truncated in the log context).
        app_type: Mini-app the command targets.

    Yields:
        The generated command id.
    """
    command_id = uuid.uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(
        command_id=command_id,
        command=command[:80],
        app_type=app_type,
    ):
        yield command_id


class CorrelationIdMiddleware:
    """Middleware that binds a correlation id to every HTTP and WebSocket scope.

    The id is taken from ``X-Correlation-ID`` or ``X-Request-ID`` when the
    client sends one, generated otherwise, stored in ``scope["state"]`` and
    echoed back on HTTP responses.
    """

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application.
        """
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Process the connection and add a correlation id."""
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        correlation_id = (
            headers.get(b"x-correlation-id", b"").decode()
            or headers.get(b"x-request-id", b"").decode()
            or str(uuid.uuid4())
        )

        if "state" not in scope:
            scope["state"] = {}
        scope["state"]["correlation_id"] = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id,
            path=scope.get("path", ""),
        )

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = list(message.get("headers", []))
                response_headers.append((b"x-correlation-id", correlation_id.encode()))
                message["headers"] = response_headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            structlog.contextvars.clear_contextvars()


class RequestLoggingMiddleware:
    """Middleware that logs the outcome and duration of HTTP requests."""

    def __init__(self, app: ASGIApp, *, exclude_paths: set[str] | None = None) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application.
            exclude_paths: Paths to exclude from logging (e.g., health checks).
        """
        self.app = app
        self.exclude_paths = exclude_paths or {"/health", "/ready"}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Process the request and log information."""
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        logger = structlog.get_logger(__name__)
        start_time = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            logger.exception("Request failed with exception", method=scope.get("method", ""))
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            if status_code >= 500:
                log_method = logger.error
            elif status_code >= 400:
                log_method = logger.warning
            else:
                log_method = logger.info
            log_method(
                "Request completed",
                method=scope.get("method", ""),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
            )
