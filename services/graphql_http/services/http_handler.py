"""
GraphQL over HTTP handler.

Adapts an inbound HTTP request to a :class:`WebGraphQlRequest`, delegates to a
:class:`WebGraphQlHandler` and turns its outcome into an HTTP response.

The outcome is two-armed: a ready :class:`starlette.responses.Response` when
the GraphQL handler has already finished, otherwise a
:class:`DeferredResponse` that completes once it does.
"""

import asyncio
import json
import logging
from functools import partial
from typing import Callable, List, Optional, Union

from starlette.requests import Request
from starlette.responses import Response

from services.common.core.request_context import get_request_id, set_request_id

from ..core.exceptions import InvalidMediaTypeError, RequestHandlingError, UnsupportedMediaTypeError
from ..core.id_generator import AlternativeIdGenerator, IdGenerator
from ..core.media_type import APPLICATION_GRAPHQL, APPLICATION_JSON, MediaType, select_response_media_type
from ..core.server_request import ServerRequest, init_cookies
from ..models import GraphQlRequest, WebGraphQlRequest, WebGraphQlResponse
from .web_handler import WebGraphQlHandler

logger = logging.getLogger("graphql_http.handler")

# Headers of the GraphQL response that are not copied onto the HTTP response.
_COMPUTED_HEADERS = frozenset({"content-type", "content-length"})

ResponseMapper = Callable[[WebGraphQlResponse], Response]


def _settle(outcome: "asyncio.Future[WebGraphQlResponse]", mapper: ResponseMapper) -> Response:
    """Map a finished outcome to a response; any failure becomes RequestHandlingError."""
    if outcome.cancelled():
        raise RequestHandlingError(asyncio.CancelledError("GraphQL request was cancelled"))
    exc = outcome.exception()
    if exc is not None:
        raise RequestHandlingError(exc) from exc
    try:
        return mapper(outcome.result())
    except Exception as e:
        raise RequestHandlingError(e) from e


class DeferredResponse:
    """
    Completion handle for a response that is not available yet.

    Completes with the HTTP response, or with :class:`RequestHandlingError`
    carrying the cause. Await it, or register callbacks with :meth:`subscribe`.
    """

    def __init__(self, outcome: "asyncio.Future[WebGraphQlResponse]", mapper: ResponseMapper):
        self._mapper = mapper
        self._result: "asyncio.Future[Response]" = outcome.get_loop().create_future()
        outcome.add_done_callback(self._complete)

    def _complete(self, outcome: "asyncio.Future[WebGraphQlResponse]") -> None:
        if self._result.done():
            return
        try:
            response = _settle(outcome, self._mapper)
        except RequestHandlingError as exc:
            self._result.set_exception(exc)
        else:
            self._result.set_result(response)

    def done(self) -> bool:
        return self._result.done()

    def result(self) -> Response:
        """The response once complete; raises the failure, or InvalidStateError if pending."""
        return self._result.result()

    def subscribe(self, callback: Callable[["DeferredResponse"], None]) -> None:
        """Call ``callback(self)`` on completion, immediately scheduled if already complete."""
        self._result.add_done_callback(lambda _: callback(self))

    def __await__(self):
        # A cancelled waiter must not cancel the handle shared with other subscribers.
        return asyncio.shield(self._result).__await__()


HandlerResult = Union[Response, DeferredResponse]


async def resolve_result(result: HandlerResult) -> Response:
    """Wait for either arm of a handler result to produce the HTTP response."""
    if isinstance(result, DeferredResponse):
        return await result
    return result


def read_body(request: ServerRequest) -> GraphQlRequest:
    try:
        return request.body_as(GraphQlRequest)
    except UnsupportedMediaTypeError as ex:
        return apply_application_graphql_fallback(request, ex)


def apply_application_graphql_fallback(
    request: ServerRequest, ex: UnsupportedMediaTypeError
) -> GraphQlRequest:
    """
    Retry the body once as JSON when it was sent as application/graphql.

    GraphQL over HTTP requires application/json but some clients still send
    application/graphql with a JSON body. If the retry fails too, the original
    error is raised.
    """
    content_type_header = request.first_header("content-type")
    if content_type_header and content_type_header.strip():
        try:
            content_type: Optional[MediaType] = MediaType.parse(content_type_header)
        except InvalidMediaTypeError:
            content_type = None
        if content_type is not None and APPLICATION_GRAPHQL.includes(content_type):
            try:
                return request.mutate(content_type=APPLICATION_JSON, body=request.body).body_as(GraphQlRequest)
            except Exception:
                logger.debug("application/graphql fallback failed", exc_info=True)
    raise ex


class GraphQlHttpHandler:
    """GraphQL handler to expose as a FastAPI/Starlette endpoint."""

    def __init__(
        self,
        graphql_handler: WebGraphQlHandler,
        id_generator: Optional[IdGenerator] = None,
        default_locale: Optional[str] = None,
    ):
        """
        Args:
            graphql_handler: common handler for GraphQL over HTTP requests
            id_generator: source of request ids, one per call
            default_locale: locale used when the client sends no Accept-Language
        """
        if graphql_handler is None:
            raise ValueError("WebGraphQlHandler is required")
        self.graphql_handler = graphql_handler
        self.id_generator = id_generator or AlternativeIdGenerator()
        self.default_locale = default_locale

    async def handle_request(self, request: Request) -> HandlerResult:
        """
        Handle a GraphQL request over HTTP.

        Raises:
            ServerWebInputError: the body could not be read or decoded
            UnsupportedMediaTypeError: the Content-Type cannot carry a GraphQL request
            RequestHandlingError: the GraphQL handler failed and had already finished
        """
        server_request = await ServerRequest.from_starlette(request, self.default_locale)
        try:
            return self.handle(server_request)
        finally:
            # Exposed to middleware, which runs outside this context.
            request_id = get_request_id()
            if request_id:
                request.state.request_id = request_id

    def handle(self, server_request: ServerRequest) -> HandlerResult:
        """Same as :meth:`handle_request` for an already read request; needs a running loop."""
        graphql_request = WebGraphQlRequest(
            uri=server_request.uri,
            headers=server_request.headers(),
            cookies=init_cookies(server_request),
            attributes=server_request.attributes,
            body=read_body(server_request),
            id=str(self.id_generator.generate_id()),
            locale=server_request.locale,
        )
        set_request_id(graphql_request.id)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Executing: %r", graphql_request)

        try:
            outcome = asyncio.ensure_future(self.graphql_handler.handle_request(graphql_request))
        except Exception as e:
            raise RequestHandlingError(e) from e
        mapper = partial(self._build_response, server_request)

        if outcome.done():
            return _settle(outcome, mapper)
        return DeferredResponse(outcome, mapper)

    @staticmethod
    def _build_response(server_request: ServerRequest, response: WebGraphQlResponse) -> Response:
        logger.debug("Execution complete")
        http_response = Response(
            content=json.dumps(response.to_map(), ensure_ascii=False).encode("utf-8"),
            status_code=200,
            media_type=str(select_response_media_type(_accept_header(server_request))),
        )
        for name, values in response.response_headers.items():
            if name.lower() in _COMPUTED_HEADERS:
                continue
            for value in values:
                http_response.headers.append(name, value)
        return http_response


def _accept_header(server_request: ServerRequest) -> Optional[str]:
    values: List[str] = server_request.header("accept")
    return ", ".join(values) if values else None
