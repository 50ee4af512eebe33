"""
GraphQL gateway configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from typing import List, Literal

from pydantic import Field

from services.common.core.config import BaseAppConfig


class GraphQlHttpConfig(BaseAppConfig):
    """
    Configuration management for the GraphQL HTTP gateway.
    """

    # Server settings
    UVICORN_BIND_ADDR: str = Field(default="0.0.0.0:8000", description="Listen address")
    VICTORIALOGS_URL: str = Field(default="", description="VictoriaLogs ingestion URL")

    # GraphQL endpoint
    GRAPHQL_PATH: str = Field(default="/graphql", description="Path of the GraphQL endpoint")
    DEFAULT_LOCALE: str = Field(
        default="en-US", description="Locale used when the client sends no Accept-Language"
    )
    ID_GENERATOR: Literal["alternative", "uuid4"] = Field(
        default="alternative", description="Request id generator strategy"
    )

    # Upstream GraphQL execution service
    GRAPHQL_UPSTREAM_URL: str = Field(
        default="http://graphql-engine:8080/graphql", description="GraphQL execution service URL"
    )
    UPSTREAM_TIMEOUT: float = Field(default=30.0, description="Upstream request timeout (seconds)")
    FORWARDED_HEADERS: List[str] = Field(
        default_factory=lambda: ["authorization", "accept-language", "x-trace-id"],
        description="Inbound headers passed through to the execution service",
    )

    # FastAPI settings
    root_path: str = Field(default="", description="API root path (for proxy)")


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = GraphQlHttpConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
