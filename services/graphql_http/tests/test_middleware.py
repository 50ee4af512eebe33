from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import Request, Response

from services.common.core import request_context
from services.graphql_http.middleware import trace_propagation_middleware


def _request(headers=None):
    request = MagicMock(spec=Request)
    request.headers = headers or {}
    request.method = "POST"
    request.url.path = "/graphql"
    request.client = MagicMock()
    request.client.host = "127.0.0.1"
    request.state = SimpleNamespace()
    return request


@pytest.mark.asyncio
async def test_generates_trace_id_and_echoes_request_id():
    request = _request()

    async def call_next(req):
        req.state.captured_trace_id = request_context.get_trace_id()
        req.state.request_id = "req-123"
        return Response(status_code=200)

    request_context.clear_trace_id()
    response = await trace_propagation_middleware(request, call_next)

    trace_id = request.state.captured_trace_id
    assert trace_id.startswith("Root=1-")
    assert response.headers["X-Trace-Id"] == trace_id
    assert response.headers["X-Request-Id"] == "req-123"
    # Context is cleared once the exchange is done.
    assert request_context.get_trace_id() is None


@pytest.mark.asyncio
async def test_propagates_incoming_trace_id():
    request = _request({"X-Trace-Id": "Root=1-5759e988-bd862e3fe1be46a994272793;Sampled=0"})

    async def call_next(req):
        return Response(status_code=204)

    response = await trace_propagation_middleware(request, call_next)

    assert response.headers["X-Trace-Id"] == "Root=1-5759e988-bd862e3fe1be46a994272793;Sampled=0"
    assert "X-Request-Id" not in response.headers


@pytest.mark.asyncio
async def test_invalid_trace_id_is_replaced():
    request = _request({"X-Trace-Id": "Parent=abc;Sampled=1"})

    async def call_next(req):
        return Response(status_code=200)

    response = await trace_propagation_middleware(request, call_next)

    assert response.headers["X-Trace-Id"].startswith("Root=1-")
    assert "abc" not in response.headers["X-Trace-Id"]
