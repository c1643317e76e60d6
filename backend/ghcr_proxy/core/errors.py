"""
API error types and exception handlers.

- Defines a small hierarchy of ApiError exceptions.
- Maps errors to one JSON shape for clients: {message, status, timestamp, request_id}.
- Registers FastAPI exception handlers, including request validation failures.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ghcr_proxy.core.logging import get_logger
from ghcr_proxy.schemas.errors import ErrorResponse

__all__ = [
    "ApiError",
    "BadRequestError",
    "UpstreamError",
    "InternalServerError",
    "error_response",
    "register_exception_handlers",
]

log = get_logger(__name__)


# -------------------------------
# Exception types
# -------------------------------

class ApiError(Exception):
    """
    Base API error carrying the HTTP status to answer with.

    The status may be overridden per instance, e.g. to relay an upstream 401.
    """
    status_code: int = 400

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ApiError):
    status_code = 400


class UpstreamError(ApiError):
    status_code = 502


class InternalServerError(ApiError):
    status_code = 500


# -------------------------------
# Handlers
# -------------------------------

def _request_id(request: Request) -> Optional[str]:
    # Accept common correlation headers
    return request.headers.get("x-request-id") or request.headers.get("x-correlation-id")


def error_response(request: Request, message: str, status_code: int) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        status=status_code,
        timestamp=datetime.now(),
        request_id=_request_id(request),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def api_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, ApiError):
        return error_response(request, exc.message, exc.status_code)
    return await unhandled_error_handler(request, exc)


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        msg = str(err.get("msg", "Invalid value"))
        # pydantic prefixes custom ValueError messages
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        elif err.get("type") == "missing":
            field = err.get("loc", ("",))[-1]
            msg = f"{str(field).capitalize()} is required"
        messages.append(msg)
    return "; ".join(messages) or "Invalid request"


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, RequestValidationError):
        return await unhandled_error_handler(request, exc)
    return error_response(request, _validation_message(exc), 400)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return error_response(request, f"Internal server error: {exc}", 500)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers on the FastAPI app.
    """
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
