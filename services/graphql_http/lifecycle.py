"""
Where: services/graphql_http/lifecycle.py
What: Startup/shutdown orchestration for shared resources.
Why: Keep main.py focused on app assembly.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from services.common.core.http_client import HttpClientFactory

from .config import GraphQlHttpConfig
from .core import create_id_generator
from .services import GraphQlHttpHandler, HttpForwardingGraphQlHandler

logger = logging.getLogger("graphql_http.main")


@asynccontextmanager
async def manage_lifespan(app: FastAPI, graphql_config: GraphQlHttpConfig) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    factory = HttpClientFactory(graphql_config)
    factory.configure_global_settings()
    client = factory.create_async_client(timeout=graphql_config.UPSTREAM_TIMEOUT)

    try:
        web_graphql_handler = HttpForwardingGraphQlHandler(
            client,
            upstream_url=graphql_config.GRAPHQL_UPSTREAM_URL,
            forwarded_headers=graphql_config.FORWARDED_HEADERS,
            timeout=graphql_config.UPSTREAM_TIMEOUT,
        )
        graphql_http_handler = GraphQlHttpHandler(
            web_graphql_handler,
            id_generator=create_id_generator(graphql_config.ID_GENERATOR),
            default_locale=graphql_config.DEFAULT_LOCALE,
        )

        app.state.http_client = client
        app.state.web_graphql_handler = web_graphql_handler
        app.state.graphql_http_handler = graphql_http_handler

        logger.info(
            "GraphQL gateway initialized: %s -> %s",
            graphql_config.GRAPHQL_PATH,
            graphql_config.GRAPHQL_UPSTREAM_URL,
        )

        yield
    finally:
        logger.info("GraphQL gateway shutting down, closing http client.")
        await client.aclose()
