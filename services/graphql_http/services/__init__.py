"""
Services package.

Provides the HTTP adapter and the GraphQL handlers it delegates to.
"""

from .http_handler import DeferredResponse, GraphQlHttpHandler, HandlerResult, resolve_result
from .web_handler import HttpForwardingGraphQlHandler, WebGraphQlHandler

__all__ = [
    "DeferredResponse",
    "GraphQlHttpHandler",
    "HandlerResult",
    "resolve_result",
    "HttpForwardingGraphQlHandler",
    "WebGraphQlHandler",
]
