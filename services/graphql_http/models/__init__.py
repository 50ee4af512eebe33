"""
Data model definitions package.

Aggregates the request and response models shared across the gateway.
"""

from .request import GraphQlRequest, HttpCookie, WebGraphQlRequest
from .response import WebGraphQlResponse

__all__ = [
    "GraphQlRequest",
    "HttpCookie",
    "WebGraphQlRequest",
    "WebGraphQlResponse",
]
