"""
Where: services/graphql_http/exceptions.py
What: Exception handler registration and HTTP status mappings.
Why: Keep error handling setup isolated from route and lifecycle concerns.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import (
    RequestHandlingError,
    ServerWebInputError,
    UnsupportedMediaTypeError,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)

logger = logging.getLogger("graphql_http.exceptions")


async def server_web_input_handler(request: Request, exc: ServerWebInputError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Bad Request", "detail": str(exc)},
    )


async def unsupported_media_type_handler(request: Request, exc: UnsupportedMediaTypeError):
    return JSONResponse(
        status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        content={"message": "Unsupported Media Type", "detail": str(exc)},
        headers={"Accept": ", ".join(exc.supported)},
    )


async def request_handling_handler(request: Request, exc: RequestHandlingError):
    logger.error(
        "GraphQL request handling failed",
        exc_info=(type(exc.cause), exc.cause, exc.cause.__traceback__),
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error", "detail": str(exc.cause)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, global_exception_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(ServerWebInputError, server_web_input_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(UnsupportedMediaTypeError, unsupported_media_type_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(RequestHandlingError, request_handling_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
