# boardshelf/errors.py
"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; `register_exception_handlers` maps them to status codes
so route handlers never build error responses by hand.
"""
import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class BoardShelfError(Exception):
    """Base exception for BoardShelf"""

    status_code = 500
    default_code = "BOARDSHELF_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, "status": "fail"}


class NotFound(BoardShelfError):
    status_code = 404
    default_code = "NOT_FOUND"


class InvalidState(BoardShelfError):
    """Operation does not fit the game's current ownership or wishlist state."""

    status_code = 400
    default_code = "INVALID_STATE"


class InvalidInput(BoardShelfError):
    status_code = 400
    default_code = "INVALID_INPUT"


class Conflict(BoardShelfError):
    """Uniqueness or referential-integrity violation."""

    status_code = 409
    default_code = "CONFLICT"


class Unavailable(BoardShelfError):
    """Database unreachable or timed out. Safe for the client to retry."""

    status_code = 503
    default_code = "DATABASE_UNAVAILABLE"


# Raised by drivers/pool when the database cannot be reached in time
UNAVAILABLE_ERRORS = (
    asyncio.TimeoutError,
    ConnectionError,
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.TimeoutError,
)


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(BoardShelfError)
    async def handle_boardshelf_error(request: Request, exc: BoardShelfError):
        if exc.status_code >= 500:
            logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "status": "fail",
                "details": jsonable_errors(exc),
            },
        )

    # Custom 404 handler
    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"message": "This route does not exist"})
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.exception_handler(sa_exc.IntegrityError)
    async def handle_integrity_error(request: Request, exc: sa_exc.IntegrityError):
        logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return JSONResponse(
            status_code=409,
            content={"error": "CONFLICT", "message": "Operation violates a data constraint", "status": "fail"},
        )

    async def handle_unavailable(request: Request, exc: Exception):
        logger.error("Database unavailable on %s %s: %r", request.method, request.url.path, exc)
        return JSONResponse(status_code=503, content=Unavailable("Database is currently unavailable").to_dict())

    for exc_class in UNAVAILABLE_ERRORS:
        app.add_exception_handler(exc_class, handle_unavailable)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error("ERROR %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold exception instances, not JSON serializable
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
