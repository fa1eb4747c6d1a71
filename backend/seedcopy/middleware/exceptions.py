"""Custom exception handlers for consistent error responses.

Every error leaves the service as ``{"error": "...", "details": "..."}``
(``details`` optional) so the client facade can normalise them without
caring which layer raised.
"""

import logging
from typing import Union

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from seedcopy.config import settings

logger = logging.getLogger(__name__)


class SeedCopyError(Exception):
    """Base exception for SeedCopy application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationFailedError(SeedCopyError):
    """Missing or malformed input."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class AuthenticationError(SeedCopyError):
    """Missing, invalid or expired credential."""

    def __init__(
        self,
        message: str = "Authentication required. Please sign in.",
        details: str | None = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
        )


class ResourceNotFoundError(SeedCopyError):
    """A record is missing or belongs to someone else."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details=identifier,
        )


class UpstreamServiceError(SeedCopyError):
    """A third-party service (AI provider, auth provider) failed."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
        )


def create_error_response(
    status_code: int,
    message: str,
    details: str | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    """Create standardized error response.

    Format:
    {
        "error": "Human-readable error message",
        "details": "Optional additional details"
    }
    """
    content = {"error": message}
    if details:
        content["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=headers,
    )


async def seedcopy_exception_handler(
    request: Request,
    exc: SeedCopyError,
) -> JSONResponse:
    """Handle custom SeedCopy exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"SeedCopy exception: {exc.status_code} - {exc.message}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        details=exc.details,
        headers=headers,
    )


async def http_exception_handler(
    request: Request,
    exc: Union[HTTPException, StarletteHTTPException],
) -> JSONResponse:
    """Render framework HTTP errors (404 routes, 405 methods) in the shared shape."""
    if exc.status_code >= 500:
        logger.error(
            f"HTTP {exc.status_code}: {exc.detail}",
            extra={
                "path": request.url.path,
                "method": request.method,
            },
        )

    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _format_validation_errors(errors: list[dict]) -> str:
    parts = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


async def validation_exception_handler(
    request: Request,
    exc: Union[RequestValidationError, ValidationError],
) -> JSONResponse:
    """Handle Pydantic validation errors as 400 Bad Request."""
    logger.warning(
        f"Validation error on {request.url.path}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors(),
        },
    )

    return create_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message="Validation error",
        details=_format_validation_errors(exc.errors()),
    )


async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Last resort: log with traceback and answer 500."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
        exc_info=True,
    )

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal server error",
        details=str(exc) if settings.debug else None,
    )


def register_exception_handlers(app):
    """Install every handler above on ``app``."""
    app.add_exception_handler(SeedCopyError, seedcopy_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
