"""
GraphQL request models.

The payload a client posts and the per-call request descriptor handed to the
GraphQL handler.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class GraphQlRequest(BaseModel):
    """
    Body of a GraphQL over HTTP request.

    ``{"query": "...", "operationName": "...", "variables": {...}, "extensions": {...}}``
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    query: str
    operationName: Optional[str] = None
    variables: Optional[Dict[str, Any]] = None
    extensions: Optional[Dict[str, Any]] = None

    def to_map(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class HttpCookie:
    """A cookie as sent by the client: name and value only."""

    __slots__ = ("name", "value")

    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HttpCookie):
            return NotImplemented
        return self.name == other.name and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.name, self.value))

    def __repr__(self) -> str:
        return f"{self.name}={self.value}"


class WebGraphQlRequest:
    """
    GraphQL request enriched with the HTTP context it arrived in.

    Built once per call and discarded afterwards; mappings are exposed read-only.
    """

    def __init__(
        self,
        uri: str,
        headers: Mapping[str, List[str]],
        cookies: Mapping[str, List[HttpCookie]],
        attributes: Mapping[str, Any],
        body: GraphQlRequest,
        id: str,
        locale: Optional[str] = None,
    ):
        if not id:
            raise ValueError("'id' is required")
        self.uri = uri
        self.headers: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {name: tuple(values) for name, values in headers.items()}
        )
        self.cookies: Mapping[str, Tuple[HttpCookie, ...]] = MappingProxyType(
            {name: tuple(values) for name, values in cookies.items()}
        )
        self.attributes: Mapping[str, Any] = MappingProxyType(dict(attributes))
        self.body = body
        self.id = id
        self.locale = locale

    @property
    def document(self) -> str:
        return self.body.query

    @property
    def operation_name(self) -> Optional[str]:
        return self.body.operationName

    @property
    def variables(self) -> Dict[str, Any]:
        return self.body.variables or {}

    @property
    def extensions(self) -> Dict[str, Any]:
        return self.body.extensions or {}

    def first_header(self, name: str) -> Optional[str]:
        values = self.headers.get(name.lower())
        return values[0] if values else None

    def __repr__(self) -> str:
        return (
            f"WebGraphQlRequest(id={self.id!r}, uri={self.uri!r}, "
            f"document={self.document!r}, operationName={self.operation_name!r}, "
            f"variables={self.variables!r}, locale={self.locale!r})"
        )
