"""
Centralized exception handling for PocketCloset backend.
Every failure leaves the API as {"ok": false, "error": ...}.
"""
import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded

logger = logging.getLogger(__name__)


# =============================================================================
# Custom Exception Classes
# =============================================================================

class PocketClosetError(Exception):
    """Base exception for PocketCloset application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(message)


class NotFoundError(PocketClosetError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details={"resource": resource, "id": resource_id}
        )


class ValidationError(PocketClosetError):
    """Input validation failed."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            details={"field": field} if field else {}
        )


class AuthenticationError(PocketClosetError):
    """Authentication failed."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="AUTHENTICATION_ERROR"
        )


class AuthorizationError(PocketClosetError):
    """User not authorized for this action."""

    def __init__(self, message: str = "Not authorized to perform this action"):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="AUTHORIZATION_ERROR"
        )


class ConflictError(PocketClosetError):
    """Resource already exists."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT",
            details={"field": field} if field else {}
        )


class RateLimitError(PocketClosetError):
    """Rate limit exceeded."""

    def __init__(self, message: str = "Rate limit exceeded. Please try again later.", retry_after: Optional[int] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error_code="RATE_LIMIT_ERROR",
            details={"retry_after": retry_after} if retry_after else {}
        )


class ExternalServiceError(PocketClosetError):
    """External service (Gemini, Cloudinary, etc.) failed."""

    def __init__(self, service: str, message: str):
        super().__init__(
            message=f"{service} service error: {message}",
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code="EXTERNAL_SERVICE_ERROR",
            details={"service": service}
        )


class DatabaseError(PocketClosetError):
    """Database operation failed."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="DATABASE_ERROR"
        )


# =============================================================================
# Error Response Model
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response format."""
    ok: bool = False
    error: str
    error_code: str
    details: Optional[Dict[str, Any]] = None


def _error_response(status_code: int, error_code: str, message: str, details=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=message,
            error_code=error_code,
            details=details or None
        ).model_dump(exclude_none=True),
        headers=headers,
    )


# =============================================================================
# Exception Handlers for FastAPI
# =============================================================================

async def pocketcloset_exception_handler(request: Request, exc: PocketClosetError) -> JSONResponse:
    """Handle application exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return _error_response(exc.status_code, exc.error_code, exc.message, exc.details, headers)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTPExceptions with consistent format."""
    error_code = "HTTP_ERROR"
    if exc.status_code == 400:
        error_code = "BAD_REQUEST"
    elif exc.status_code == 401:
        error_code = "UNAUTHORIZED"
    elif exc.status_code == 403:
        error_code = "FORBIDDEN"
    elif exc.status_code == 404:
        error_code = "NOT_FOUND"
    elif exc.status_code == 405:
        error_code = "METHOD_NOT_ALLOWED"
    elif exc.status_code == 409:
        error_code = "CONFLICT"
    elif exc.status_code >= 500:
        error_code = "SERVER_ERROR"

    return _error_response(exc.status_code, error_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body/query did not match the schema; reported as a 400."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path", "form"))
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        message,
        {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors]},
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """slowapi limit hit."""
    logger.warning(f"Rate limit hit on {request.url.path}: {exc.detail}")
    return _error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "RATE_LIMIT_ERROR",
        f"Rate limit exceeded: {exc.detail}",
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with logging."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        exc_info=True,
        extra={"path": request.url.path, "method": request.method}
    )

    # In production, don't expose internal error details
    from pocketcloset.config import settings
    is_dev = not settings.is_production

    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        str(exc) if is_dev else "An unexpected error occurred",
        {"traceback": traceback.format_exc()} if is_dev else None,
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(PocketClosetError, pocketcloset_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, generic_exception_handler)


# =============================================================================
# Utility Functions
# =============================================================================

def raise_not_found(resource: str, resource_id: Any = None) -> None:
    """Convenience function to raise NotFoundError."""
    raise NotFoundError(resource, resource_id)


def safe_execute(func, *args, default=None, log_error: bool = True, **kwargs):
    """
    Safely execute a function and return default on error.
    Use for non-critical operations that shouldn't crash the request.
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        if log_error:
            logger.warning(f"safe_execute caught error in {func.__name__}: {e}")
        return default
