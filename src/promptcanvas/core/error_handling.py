"""Error handling and exception handlers for promptcanvas.

Provides structured error responses with correlation IDs and proper HTTP status codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from litestar import Response
from litestar.status_codes import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

if TYPE_CHECKING:
    from litestar import Request
    from litestar.exceptions import HTTPException, ValidationException

    from promptcanvas.exceptions import InvalidShapeError, ShapeNotFoundError

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    422: "validation_error",
    500: "internal_error",
    502: "bad_gateway",
    503: "service_unavailable",
}


@dataclass
class ErrorDetail:
    """Details about a specific error."""

    field: str | None = None
    message: str = ""
    code: str = "error"


@dataclass
class ErrorResponse:
    """Structured error response format."""

    status: str = "error"
    message: str = ""
    code: str = "internal_error"
    correlation_id: str | None = None
    details: list[ErrorDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {
            "status": self.status,
            "message": self.message,
            "code": self.code,
        }
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        if self.details:
            result["details"] = [{"field": d.field, "message": d.message, "code": d.code} for d in self.details]
        return result


def get_correlation_id(request: Request) -> str | None:
    """Extract correlation ID from request state or headers."""
    # Try request state first (set by middleware)
    correlation_id = request.scope.get("state", {}).get("correlation_id")
    if correlation_id:
        return correlation_id
    return request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID")


def _json(error_response: ErrorResponse, status_code: int) -> Response[dict[str, Any]]:
    return Response(
        content=error_response.to_dict(),
        status_code=status_code,
        media_type="application/json",
    )


def validation_exception_handler(request: Request, exc: ValidationException) -> Response[dict[str, Any]]:
    """Handle request validation errors with detailed field information.

    Returns a structured response with per-field error details.
    """
    correlation_id = get_correlation_id(request)

    details: list[ErrorDetail] = []

    if exc.extra:
        for error in exc.extra:
            if isinstance(error, dict):
                field_path = error.get("key") or error.get("loc")
                if isinstance(field_path, list | tuple):
                    field_path = ".".join(str(p) for p in field_path)
                msg = error.get("message", error.get("msg", str(error)))
                details.append(ErrorDetail(field=field_path, message=msg, code="validation_error"))
            else:
                details.append(ErrorDetail(message=str(error), code="validation_error"))

    if not details:
        details.append(ErrorDetail(message=str(exc.detail), code="validation_error"))

    logger.warning(
        "Validation error",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        error_count=len(details),
    )

    error_response = ErrorResponse(
        message="Validation failed",
        code="validation_error",
        correlation_id=correlation_id,
        details=details,
    )
    return _json(error_response, HTTP_422_UNPROCESSABLE_ENTITY)


def http_exception_handler(request: Request, exc: HTTPException) -> Response[dict[str, Any]]:
    """Handle HTTP exceptions with structured responses."""
    correlation_id = get_correlation_id(request)

    error_code = STATUS_CODES.get(exc.status_code, "error")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    log_level = "warning" if exc.status_code < 500 else "error"
    getattr(logger, log_level)(
        "HTTP exception",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        status_code=exc.status_code,
        error_code=error_code,
    )

    error_response = ErrorResponse(message=message, code=error_code, correlation_id=correlation_id)
    return _json(error_response, exc.status_code)


def shape_not_found_handler(request: Request, exc: ShapeNotFoundError) -> Response[dict[str, Any]]:
    """Handle ShapeNotFoundError exceptions."""
    correlation_id = get_correlation_id(request)

    logger.warning(
        "Shape not found",
        correlation_id=correlation_id,
        shape_id=exc.shape_id,
        path=request.url.path,
    )

    error_response = ErrorResponse(
        message=f"Shape not found: {exc.shape_id}",
        code="shape_not_found",
        correlation_id=correlation_id,
        details=[ErrorDetail(field="id", message=str(exc), code="not_found")],
    )
    return _json(error_response, HTTP_404_NOT_FOUND)


def invalid_shape_handler(request: Request, exc: InvalidShapeError) -> Response[dict[str, Any]]:
    """Handle InvalidShapeError exceptions."""
    correlation_id = get_correlation_id(request)

    logger.warning(
        "Invalid shape",
        correlation_id=correlation_id,
        field=exc.field,
        error=str(exc),
        path=request.url.path,
    )

    error_response = ErrorResponse(
        message="Invalid shape",
        code="invalid_shape",
        correlation_id=correlation_id,
        details=[ErrorDetail(field=exc.field, message=str(exc), code="invalid")],
    )
    return _json(error_response, HTTP_422_UNPROCESSABLE_ENTITY)


def generic_exception_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle unexpected exceptions with a generic error response.

    Logs the full exception but returns a safe message to the client.
    """
    correlation_id = get_correlation_id(request)

    logger.exception(
        "Unhandled exception",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )

    error_response = ErrorResponse(
        message="An unexpected error occurred. Please try again later.",
        code="internal_error",
        correlation_id=correlation_id,
    )
    return _json(error_response, HTTP_500_INTERNAL_SERVER_ERROR)


def get_exception_handlers() -> dict:
    """Get all exception handlers for the application.

    Returns:
        Dictionary mapping exception types to handler functions.

    Note:
        Uses deferred imports to avoid circular dependencies.
    """
    from litestar.exceptions import HTTPException, ValidationException

    from promptcanvas.exceptions import InvalidShapeError, ShapeNotFoundError

    return {
        ValidationException: validation_exception_handler,
        HTTPException: http_exception_handler,
        ShapeNotFoundError: shape_not_found_handler,
        InvalidShapeError: invalid_shape_handler,
        Exception: generic_exception_handler,
    }
