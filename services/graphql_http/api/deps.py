"""
Dependency Injection for the GraphQL gateway API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..services.http_handler import GraphQlHttpHandler


def get_graphql_http_handler(request: Request) -> GraphQlHttpHandler:
    return request.app.state.graphql_http_handler


GraphQlHttpHandlerDep = Annotated[GraphQlHttpHandler, Depends(get_graphql_http_handler)]
