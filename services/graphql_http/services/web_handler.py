"""
GraphQL handler contract and the default upstream-forwarding implementation.

The HTTP adapter only depends on :class:`WebGraphQlHandler`; how a request is
executed is up to the implementation.
"""

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Dict, List, Sequence

import httpx

from ..core.exceptions import GraphQlExecutionError
from ..models import WebGraphQlRequest, WebGraphQlResponse

logger = logging.getLogger("graphql_http.web_handler")

# Upstream response headers that are relayed to the client.
RELAYED_RESPONSE_HEADERS = ("cache-control", "set-cookie", "vary")


class WebGraphQlHandler(ABC):
    @abstractmethod
    def handle_request(self, request: WebGraphQlRequest) -> Awaitable[WebGraphQlResponse]:
        """
        Execute the request and complete with its response.

        May return a coroutine or a future; a future that is already done lets
        the caller answer without suspending.
        """
        pass


class HttpForwardingGraphQlHandler(WebGraphQlHandler):
    """Forwards requests to a GraphQL execution service over HTTP."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        upstream_url: str,
        forwarded_headers: Sequence[str] = (),
        timeout: float = 30.0,
    ):
        """
        Args:
            client: Shared httpx.AsyncClient
            upstream_url: URL the GraphQL payload is POSTed to
            forwarded_headers: inbound header names passed through upstream
            timeout: Upstream request timeout (seconds)
        """
        self.client = client
        self.upstream_url = upstream_url
        self.forwarded_headers = tuple(name.lower() for name in forwarded_headers)
        self.timeout = timeout

    def _upstream_headers(self, request: WebGraphQlRequest) -> List[tuple]:
        headers = [
            ("content-type", "application/json"),
            ("accept", "application/graphql-response+json, application/json"),
            ("x-request-id", request.id),
        ]
        for name in self.forwarded_headers:
            for value in request.headers.get(name, ()):
                headers.append((name, value))
        if request.locale and "accept-language" not in self.forwarded_headers:
            headers.append(("accept-language", request.locale))
        return headers

    async def handle_request(self, request: WebGraphQlRequest) -> WebGraphQlResponse:
        try:
            response = await self.client.post(
                self.upstream_url,
                json=request.body.to_map(),
                headers=self._upstream_headers(request),
                timeout=self.timeout,
            )
        except httpx.RequestError as e:
            logger.error(
                "GraphQL upstream request failed",
                extra={
                    "target_url": self.upstream_url,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            raise GraphQlExecutionError(f"GraphQL upstream unreachable: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise GraphQlExecutionError(
                f"GraphQL upstream returned a non-JSON body (status {response.status_code})"
            ) from e

        if not isinstance(payload, dict) or not ({"data", "errors"} & payload.keys()):
            raise GraphQlExecutionError(
                f"GraphQL upstream returned no GraphQL response (status {response.status_code})"
            )

        relayed: Dict[str, List[str]] = {}
        for name in RELAYED_RESPONSE_HEADERS:
            values = response.headers.get_list(name)
            if values:
                relayed[name] = values

        return WebGraphQlResponse.from_map(payload, response_headers=relayed)
