"""
Error taxonomy and the JSON envelopes they render to.

Store-layer errors (StoreError, DuplicateEmail) are raised by the services and
never reach the client directly: routes catch them at the handler boundary and
re-raise the HTTP-facing kind for that operation. Every HTTP-facing kind is an
ApiError and is rendered by ``api_error_handler``.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = structlog.get_logger()

STATUS_SUCCESS = "success"
STATUS_BAD_REQUEST = "Bad request"
STATUS_ERROR = "error"


# ---------------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------------

class StoreError(Exception):
    """A persistence failure. ``str(exc)`` is the raw driver message."""


class DuplicateEmail(StoreError):
    """The unique email constraint rejected an insert."""


# ---------------------------------------------------------------------------
# HTTP-facing errors
# ---------------------------------------------------------------------------

class ApiError(Exception):
    status_code: int = 500
    status: str = STATUS_ERROR
    message: str = "Server error"

    def __init__(self, message: Optional[str] = None, *, error: Optional[str] = None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        self.error = error

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "status": self.status,
            "message": self.message,
            "statusCode": self.status_code,
        }
        if self.error is not None:
            body["error"] = self.error
        return body


class BadRequest(ApiError):
    status_code = 400
    status = STATUS_BAD_REQUEST
    message = "Bad request"


class AuthenticationFailed(ApiError):
    """Unknown email or wrong password on login."""

    status_code = 401
    status = STATUS_BAD_REQUEST
    message = "Authentication failed"


class MissingCredentials(ApiError):
    """No Authorization header on a protected route."""

    status_code = 401
    message = "Unauthorized"


class InvalidCredentials(ApiError):
    """Authorization header present but the token is unusable."""

    status_code = 403
    message = "Forbidden"


class NotFound(ApiError):
    status_code = 404
    message = "Not found"


class ServerError(ApiError):
    status_code = 500
    message = "Server error"


class RequestValidationFailed(ApiError):
    """One or more request fields failed validation."""

    status_code = 422
    status = STATUS_BAD_REQUEST
    message = "Validation failed"

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__()
        self.errors = errors

    def to_body(self) -> dict[str, Any]:
        return {"errors": self.errors}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error(
            "request.failed",
            path=request.url.path,
            status=exc.status_code,
            error=exc.error,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI's own parsing failures in the field-error shape."""
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        errors.append(
            {
                "type": "field",
                "field": field,
                "path": field,
                "location": "body",
                "value": None,
                "message": err.get("msg", "Invalid value"),
                "msg": err.get("msg", "Invalid value"),
            }
        )
    return JSONResponse(status_code=422, content={"errors": errors})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("request.unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content=ServerError().to_body())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
