import asyncio
import os
from typing import List, Optional, Sequence, Tuple

import pytest
from starlette.requests import Request

# Config is built at import time, so the environment is prepared at module level.
os.environ.setdefault("LOG_CONFIG_PATH", "/tmp/graphql-gateway-missing-logging.yml")
os.environ.setdefault("DISABLE_VICTORIALOGS", "1")
os.environ.setdefault("GRAPHQL_UPSTREAM_URL", "http://graphql-engine.test/graphql")

from services.graphql_http.models import WebGraphQlResponse  # noqa: E402
from services.graphql_http.services.web_handler import WebGraphQlHandler  # noqa: E402


def build_request(
    body: bytes = b"",
    headers: Sequence[Tuple[str, str]] = (),
    path: str = "/graphql",
    query_string: bytes = b"",
) -> Request:
    """Starlette request over a raw ASGI scope, with ``body`` as the only message."""
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": "POST",
        "scheme": "http",
        "server": ("testserver", 80),
        "path": path,
        "root_path": "",
        "query_string": query_string,
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers],
        "client": ("127.0.0.1", 12345),
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


class StubGraphQlHandler(WebGraphQlHandler):
    """Records requests and answers with a fixed response or error."""

    def __init__(
        self,
        response: Optional[WebGraphQlResponse] = None,
        error: Optional[BaseException] = None,
        completed: bool = False,
    ):
        self.response = response if response is not None else WebGraphQlResponse(data={"ok": True})
        self.error = error
        self.completed = completed
        self.requests: List = []

    def handle_request(self, request):
        self.requests.append(request)
        if self.completed:
            future = asyncio.get_running_loop().create_future()
            if self.error is not None:
                future.set_exception(self.error)
            else:
                future.set_result(self.response)
            return future
        return self._execute()

    async def _execute(self):
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def request_factory():
    return build_request


@pytest.fixture
def stub_handler_factory():
    return StubGraphQlHandler
