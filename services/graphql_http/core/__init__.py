"""
Core logic package.

Provides media type handling, request snapshots, request ids and domain errors.
"""

from .exceptions import (
    GraphQlExecutionError,
    InvalidMediaTypeError,
    RequestHandlingError,
    ServerWebInputError,
    UnsupportedMediaTypeError,
)
from .id_generator import AlternativeIdGenerator, IdGenerator, RandomUuidIdGenerator, create_id_generator
from .media_type import SUPPORTED_MEDIA_TYPES, MediaType, select_response_media_type
from .server_request import ServerRequest, init_cookies

__all__ = [
    "GraphQlExecutionError",
    "InvalidMediaTypeError",
    "RequestHandlingError",
    "ServerWebInputError",
    "UnsupportedMediaTypeError",
    "AlternativeIdGenerator",
    "IdGenerator",
    "RandomUuidIdGenerator",
    "create_id_generator",
    "SUPPORTED_MEDIA_TYPES",
    "MediaType",
    "select_response_media_type",
    "ServerRequest",
    "init_cookies",
]
