"""Error taxonomy and its HTTP mapping.

Services raise these; they never raise HTTPException and never let a raw
SQLAlchemy error escape. The handlers registered in main.py turn each
kind into one status code with a short {"detail": ...} body.

    ValidationError   → 400
    UnauthorizedError → 401
    NotFoundError     → 404
    ConflictError     → 409
"""

from http import HTTPStatus

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


class MessagelyError(Exception):
    """Base class for errors that carry their own HTTP status."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MessagelyError):
    """Malformed input."""

    status = HTTPStatus.BAD_REQUEST
    default_message = "Invalid request"


class UnauthorizedError(MessagelyError):
    """Missing/invalid credentials, or authenticated but not permitted."""

    status = HTTPStatus.UNAUTHORIZED
    default_message = "Invalid or missing credentials"


class NotFoundError(MessagelyError):
    """Referenced entity does not exist."""

    status = HTTPStatus.NOT_FOUND
    default_message = "Not found"


class ConflictError(MessagelyError):
    """Uniqueness violation (e.g. username already taken)."""

    status = HTTPStatus.CONFLICT
    default_message = "Conflict"


async def _messagely_error_handler(request: Request, exc: MessagelyError) -> JSONResponse:
    logger.info(
        "request.rejected",
        path=request.url.path,
        status=int(exc.status),
        error=type(exc).__name__,
    )
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status,
        content={"detail": exc.message},
        headers=headers,
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Malformed bodies are ValidationError (400), not FastAPI's default 422.
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=ValidationError.status,
        content={"detail": errors},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the taxonomy → JSON response handlers on an app."""
    app.add_exception_handler(MessagelyError, _messagely_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
