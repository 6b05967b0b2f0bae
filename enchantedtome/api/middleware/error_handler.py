"""
Error Handling for Enchanted Tome

Centralized error handling:
- Structured error responses
- Exception translation (auth, validation, store failures)
- Client-facing outcomes kept out of the error log
"""

import traceback
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from .logging import get_request_id


class EnchantedTomeException(Exception):
    """Base exception for Enchanted Tome errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: str = None,
        headers: Optional[dict] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        self.headers = headers
        super().__init__(message)


class UnauthorizedError(EnchantedTomeException):
    """No credential, or one that failed verification."""

    def __init__(self, detail: str = None):
        super().__init__(
            message="Unauthorized",
            code="UNAUTHORIZED",
            status_code=401,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(EnchantedTomeException):
    """Valid credential, insufficient role."""

    def __init__(self, detail: str = "Admin access required"):
        super().__init__(
            message="Forbidden",
            code="FORBIDDEN",
            status_code=403,
            detail=detail,
        )


class NotFoundError(EnchantedTomeException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"No {resource} with identifier '{identifier}' exists",
        )


class ValidationError(EnchantedTomeException):
    """Input validation failed."""

    def __init__(self, message: str, errors: list[dict] = None, detail: str = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )
        self.errors = errors or []


class UpstreamFailure(EnchantedTomeException):
    """Record store or identity provider unreachable."""

    def __init__(self, service: str):
        super().__init__(
            message="Internal Server Error",
            code="UPSTREAM_FAILURE",
            status_code=500,
            detail="An unexpected error occurred",
        )
        self.service = service


def create_error_response(
    error: str,
    code: str,
    status_code: int,
    detail: str = None,
    errors: list[dict] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Create standardized error response."""
    content = {
        "error": error,
        "code": code,
        "detail": detail,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if errors is not None:
        content["errors"] = errors

    return JSONResponse(status_code=status_code, content=content, headers=headers)


def field_errors(exc: RequestValidationError) -> list[dict]:
    """Flatten FastAPI validation errors to ``{field, message}`` pairs."""
    flattened = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        flattened.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return flattened


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(EnchantedTomeException)
    async def enchantedtome_exception_handler(request: Request, exc: EnchantedTomeException):
        if exc.status_code >= 500:
            logger.error(
                f"[{get_request_id()}] {exc.code} on {request.method} {request.url.path}"
            )
        else:
            logger.info(f"[{get_request_id()}] {exc.code} - {exc.message}: {exc.detail}")

        return create_error_response(
            error=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            detail=exc.detail,
            errors=getattr(exc, "errors", None),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = field_errors(exc)
        error = ValidationError(
            "Validation Error",
            errors=errors,
            detail=f"{len(errors)} invalid field(s)",
        )
        logger.info(f"[{get_request_id()}] Validation error on {request.url.path}: {errors}")
        return create_error_response(
            error=error.message,
            code=error.code,
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error.detail,
            errors=error.errors,
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            f"[{get_request_id()}] Record store failure: {type(exc).__name__}: {exc}\n"
            f"{traceback.format_exc()}"
        )
        failure = UpstreamFailure("database")
        return create_error_response(
            error=failure.message,
            code=failure.code,
            status_code=failure.status_code,
            detail=failure.detail,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}\n{traceback.format_exc()}"
        )
        return create_error_response(
            error="Internal Server Error",
            code="INTERNAL_ERROR",
            status_code=500,
            detail="An unexpected error occurred",
        )
