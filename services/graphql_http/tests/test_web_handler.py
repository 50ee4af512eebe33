"""
Where: services/graphql_http/tests/test_web_handler.py
What: Upstream-forwarding GraphQL handler against a respx-mocked upstream.
Why: Verify payload/context forwarding and upstream failure mapping.
"""

import json

import httpx
import pytest
import respx

from services.graphql_http.core.exceptions import GraphQlExecutionError
from services.graphql_http.models import GraphQlRequest, HttpCookie, WebGraphQlRequest
from services.graphql_http.services.web_handler import HttpForwardingGraphQlHandler

UPSTREAM_URL = "http://graphql-engine.test/graphql"


def _graphql_request(locale="de-CH"):
    return WebGraphQlRequest(
        uri="http://testserver/graphql",
        headers={
            "authorization": ["Bearer t"],
            "x-private": ["secret"],
            "content-type": ["application/json"],
        },
        cookies={"session": [HttpCookie("session", "s1")]},
        attributes={},
        body=GraphQlRequest(query="{ a }", variables={"id": 1}),
        id="req-1",
        locale=locale,
    )


def _handler(forwarded_headers=("authorization",)):
    return HttpForwardingGraphQlHandler(
        httpx.AsyncClient(),
        upstream_url=UPSTREAM_URL,
        forwarded_headers=forwarded_headers,
        timeout=5.0,
    )


@pytest.mark.asyncio
@respx.mock
async def test_forwards_payload_and_context():
    route = respx.post(UPSTREAM_URL).mock(
        return_value=httpx.Response(
            200,
            json={"data": {"a": 1}},
            headers=[("Set-Cookie", "x=1"), ("Set-Cookie", "y=2"), ("X-Ignored", "1")],
        )
    )

    response = await _handler().handle_request(_graphql_request())

    sent = route.calls.last.request
    assert json.loads(sent.content) == {"query": "{ a }", "variables": {"id": 1}}
    assert sent.headers["content-type"] == "application/json"
    assert sent.headers["authorization"] == "Bearer t"
    assert sent.headers["x-request-id"] == "req-1"
    assert sent.headers["accept-language"] == "de-CH"
    assert "x-private" not in sent.headers

    assert response.to_map() == {"data": {"a": 1}}
    assert response.response_headers == {"set-cookie": ("x=1", "y=2")}


@pytest.mark.asyncio
@respx.mock
async def test_forwarded_accept_language_is_not_duplicated():
    route = respx.post(UPSTREAM_URL).mock(return_value=httpx.Response(200, json={"data": {}}))
    request = WebGraphQlRequest(
        uri="http://testserver/graphql",
        headers={"accept-language": ["fr"]},
        cookies={},
        attributes={},
        body=GraphQlRequest(query="{ a }"),
        id="req-2",
        locale="fr",
    )

    await _handler(forwarded_headers=("Accept-Language",)).handle_request(request)

    assert route.calls.last.request.headers.get_list("accept-language") == ["fr"]


@pytest.mark.asyncio
@respx.mock
async def test_error_only_upstream_response_is_kept():
    respx.post(UPSTREAM_URL).mock(
        return_value=httpx.Response(400, json={"errors": [{"message": "Syntax Error"}]})
    )

    response = await _handler().handle_request(_graphql_request(locale=None))

    assert response.is_data_present() is False
    assert response.to_map() == {"errors": [{"message": "Syntax Error"}]}


@pytest.mark.asyncio
@respx.mock
async def test_null_data_is_kept():
    respx.post(UPSTREAM_URL).mock(
        return_value=httpx.Response(200, json={"data": None, "errors": [{"message": "denied"}]})
    )

    response = await _handler().handle_request(_graphql_request())

    assert response.to_map() == {"data": None, "errors": [{"message": "denied"}]}


@pytest.mark.asyncio
@respx.mock
async def test_non_json_upstream_body_raises():
    respx.post(UPSTREAM_URL).mock(return_value=httpx.Response(502, text="<html>Bad Gateway</html>"))

    with pytest.raises(GraphQlExecutionError, match="non-JSON"):
        await _handler().handle_request(_graphql_request())


@pytest.mark.asyncio
@respx.mock
async def test_json_without_graphql_fields_raises():
    respx.post(UPSTREAM_URL).mock(
        return_value=httpx.Response(500, json={"message": "Internal Server Error"})
    )

    with pytest.raises(GraphQlExecutionError, match="no GraphQL response"):
        await _handler().handle_request(_graphql_request())


@pytest.mark.asyncio
@respx.mock
async def test_transport_error_raises():
    respx.post(UPSTREAM_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(GraphQlExecutionError, match="unreachable") as exc_info:
        await _handler().handle_request(_graphql_request())

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
