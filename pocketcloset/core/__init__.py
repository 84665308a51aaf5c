"""
Core module for the PocketCloset backend.
Contains exception handling and logging setup.
"""
from .exceptions import (
    PocketClosetError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    RateLimitError,
    ExternalServiceError,
    DatabaseError,
    ErrorResponse,
    register_exception_handlers,
    raise_not_found,
    safe_execute,
)
from .logging import configure_logging, correlation_id_var

__all__ = [
    "PocketClosetError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "RateLimitError",
    "ExternalServiceError",
    "DatabaseError",
    "ErrorResponse",
    "register_exception_handlers",
    "raise_not_found",
    "safe_execute",
    "configure_logging",
    "correlation_id_var",
]
