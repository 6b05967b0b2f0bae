"""
API middleware components.

Provides cross-cutting concerns for the API:
- Error handling
- CORS configuration
- Request logging with correlation IDs
"""

from .error_handler import (
    EnchantedTomeException,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    UpstreamFailure,
    setup_exception_handlers,
    create_error_response,
)

from .cors import (
    allowed_origins,
    setup_cors,
)

from .logging import (
    StructuredLogFormatter,
    RequestLoggingMiddleware,
    setup_logging,
    get_request_id,
)


__all__ = [
    # Error handling
    "EnchantedTomeException",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ValidationError",
    "UpstreamFailure",
    "setup_exception_handlers",
    "create_error_response",
    # CORS
    "allowed_origins",
    "setup_cors",
    # Logging
    "StructuredLogFormatter",
    "RequestLoggingMiddleware",
    "setup_logging",
    "get_request_id",
]
