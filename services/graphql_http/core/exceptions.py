"""
Custom exception classes.

Represent faults raised while adapting an HTTP exchange to a GraphQL request.
"""

import logging
from typing import List, Optional, Sequence

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class GraphQlHttpError(Exception):
    """Base exception class for the GraphQL HTTP gateway."""

    pass


class ServerWebInputError(GraphQlHttpError):
    """Raised when the request body cannot be read or decoded."""

    def __init__(self, reason: str, cause: Optional[BaseException] = None):
        self.reason = reason
        self.cause = cause
        message = reason if cause is None else f"{reason}: {cause}"
        super().__init__(message)


class InvalidMediaTypeError(ValueError):
    """Raised when a media type string cannot be parsed."""

    def __init__(self, media_type: str, detail: str):
        self.media_type = media_type
        self.detail = detail
        super().__init__(f"Invalid media type {media_type!r}: {detail}")


class UnsupportedMediaTypeError(GraphQlHttpError):
    """Raised when the request Content-Type cannot be read into a GraphQL request."""

    def __init__(self, content_type: Optional[str], supported: Sequence[object]):
        self.content_type = content_type
        self.supported: List[str] = [str(media_type) for media_type in supported]
        super().__init__(f"Content-Type '{content_type or ''}' is not supported")


class GraphQlExecutionError(GraphQlHttpError):
    """Raised by a GraphQL handler when execution could not produce a response."""

    pass


class RequestHandlingError(GraphQlHttpError):
    """Raised when the GraphQL handler fails; carries the original cause."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"GraphQL request handling failed: {cause!r}")


# ===========================================
# Exception Handlers
# ===========================================


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error", "detail": str(exc)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for validation errors.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": "Validation Error", "detail": str(exc.errors())},
    )
