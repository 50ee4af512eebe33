"""
GraphQL gateway - GraphQL over HTTP endpoint

Accepts GraphQL requests over HTTP, hands them to a GraphQL handler and
writes the result back with a negotiated content type.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from starlette.responses import Response

from .api.deps import GraphQlHttpHandlerDep
from .config import config
from .core.logging_config import setup_logging
from .exceptions import register_exception_handlers
from .lifecycle import manage_lifespan
from .middleware import trace_propagation_middleware
from .services import resolve_result

setup_logging()
logger = logging.getLogger("graphql_http.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with manage_lifespan(app, config):
        yield


app = FastAPI(
    title="GraphQL Gateway", version="1.0.0", lifespan=lifespan, root_path=config.root_path
)

app.middleware("http")(trace_propagation_middleware)
register_exception_handlers(app)


async def graphql_endpoint(request: Request, handler: GraphQlHttpHandlerDep) -> Response:
    """GraphQL over HTTP: POST a JSON body with query, operationName and variables."""
    return await resolve_result(await handler.handle_request(request))


app.add_api_route(config.GRAPHQL_PATH, graphql_endpoint, methods=["POST"], response_class=Response)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn

    host, _, port = config.UVICORN_BIND_ADDR.rpartition(":")
    uvicorn.run(app, host=host or "0.0.0.0", port=int(port))
