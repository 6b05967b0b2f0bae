"""
Request logging for Enchanted Tome.

One line per request: method, path, status, duration and who called
(the verified subject, or "anonymous"). Headers and bodies are never
logged, so bearer tokens cannot leak into the logs.
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Correlation ID for the request being served
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("enchantedtome.api")

REQUEST_ID_HEADER = "X-Request-ID"
ANONYMOUS = "anonymous"

# Polled by load balancers; not worth a log line each.
QUIET_PATHS = frozenset({"/health", "/favicon.ico"})

SLOW_REQUEST_SECONDS = 2.0


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get()


def caller_of(request: Request) -> str:
    """Subject recorded by the auth gate, or "anonymous"."""
    return getattr(request.state, "subject_id", None) or ANONYMOUS


class StructuredLogFormatter(logging.Formatter):
    """JSON lines for log aggregators outside development."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        for attr in ("caller", "status_code", "duration_ms"):
            if hasattr(record, attr):
                log_data[attr] = getattr(record, attr)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns the correlation ID and logs each completed request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request_id_var.set(request_id)
        # Filled in by the auth gate when a token verifies.
        request.state.subject_id = None

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        response.headers[REQUEST_ID_HEADER] = request_id
        if request.url.path in QUIET_PATHS:
            return response

        # 4xx are the caller's problem, not ours.
        if response.status_code >= 500:
            level = logging.ERROR
        elif duration > SLOW_REQUEST_SECONDS:
            level = logging.WARNING
        else:
            level = logging.INFO

        caller = caller_of(request)
        duration_ms = round(duration * 1000, 2)
        message = (
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({duration_ms}ms) caller={caller}"
        )
        if duration > SLOW_REQUEST_SECONDS:
            message = f"[SLOW] {message}"

        logger.log(
            level,
            message,
            extra={
                "caller": caller,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response


def setup_logging(app: FastAPI, structured: bool = True) -> None:
    """
    Install the request logger.

    Args:
        app: FastAPI application instance.
        structured: Emit JSON lines instead of plain text.
    """
    if structured:
        app_logger = logging.getLogger("enchantedtome")
        if not any(isinstance(h.formatter, StructuredLogFormatter) for h in app_logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredLogFormatter())
            app_logger.addHandler(handler)
        app_logger.setLevel(logging.INFO)

    app.add_middleware(RequestLoggingMiddleware)
