import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from chatgate.errors import (
    AuthenticationError,
    DuplicateAccountError,
    InvalidCredentialsError,
    RateLimitedError,
    ServiceUnavailableError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, **extra: Any
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content: dict[str, Any] = {"success": False, "message": message}
    if error_type:
        content["type"] = error_type
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    extra: dict[str, Any] = {}
    # Subclasses are checked before their parents
    if isinstance(exc, InvalidCredentialsError):
        status_code = 401
        error_type = "invalid_credentials"
    elif isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, DuplicateAccountError):
        status_code = 400
        error_type = "duplicate_account"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    elif isinstance(exc, RateLimitedError):
        status_code = 429
        error_type = "rate_limited"
        extra["retry"] = True
    elif isinstance(exc, ServiceUnavailableError):
        status_code = 503
        error_type = "service_unavailable"
    elif isinstance(exc, UpstreamError):
        status_code = 500
        error_type = "upstream_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type, **extra)


async def request_validation_error_handler(_: Request, exc: Exception) -> Response:
    """Handle malformed request bodies (400 instead of FastAPI's default 422)."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return create_json_error_response(status_code=400, message=message, error_type="validation_error")


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
