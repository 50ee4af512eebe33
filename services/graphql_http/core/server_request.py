"""
Framework-neutral view of an inbound HTTP request.

Snapshots what the GraphQL adapter needs from a Starlette request (URI,
headers, cookies, attributes, locale and the raw body) and performs the
body-to-model conversion keyed on Content-Type.
"""

import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.requests import ClientDisconnect, Request

from ..models.request import HttpCookie
from .exceptions import InvalidMediaTypeError, ServerWebInputError, UnsupportedMediaTypeError
from .media_type import APPLICATION_OCTET_STREAM, READABLE_MEDIA_TYPES, MediaType

ModelT = TypeVar("ModelT", bound=BaseModel)


class ServerRequest:
    """Immutable request snapshot; use :meth:`mutate` to derive a modified copy."""

    def __init__(
        self,
        uri: str,
        headers: Sequence[Tuple[str, str]],
        body: bytes = b"",
        attributes: Optional[Mapping[str, Any]] = None,
        default_locale: Optional[str] = None,
    ):
        self.uri = uri
        # Header names are kept lower-cased, values in arrival order.
        self.raw_headers: Tuple[Tuple[str, str], ...] = tuple(
            (name.lower(), value) for name, value in headers
        )
        self.body = body
        self.attributes: Dict[str, Any] = dict(attributes or {})
        self.default_locale = default_locale

    @classmethod
    async def from_starlette(cls, request: Request, default_locale: Optional[str] = None) -> "ServerRequest":
        """
        Read the request body and snapshot the request.

        Raises:
            ServerWebInputError: the body could not be read from the connection
        """
        try:
            body = await request.body()
        except (ClientDisconnect, OSError) as exc:
            raise ServerWebInputError("I/O error while reading request body", exc) from exc

        headers = [
            (name.decode("latin-1"), value.decode("latin-1")) for name, value in request.headers.raw
        ]
        attributes = getattr(request.state, "_state", {})
        return cls(
            uri=str(request.url),
            headers=headers,
            body=body,
            attributes=attributes,
            default_locale=default_locale,
        )

    def headers(self) -> Dict[str, List[str]]:
        """Headers as a name-keyed multimap, preserving value order."""
        result: Dict[str, List[str]] = {}
        for name, value in self.raw_headers:
            result.setdefault(name, []).append(value)
        return result

    def header(self, name: str) -> List[str]:
        name = name.lower()
        return [value for key, value in self.raw_headers if key == name]

    def first_header(self, name: str) -> Optional[str]:
        values = self.header(name)
        return values[0] if values else None

    def cookies(self) -> List[Tuple[str, str]]:
        """Cookie name/value pairs in the order the client sent them, duplicates kept."""
        pairs: List[Tuple[str, str]] = []
        for header in self.header("cookie"):
            for chunk in header.split(";"):
                name, sep, value = chunk.partition("=")
                name = name.strip()
                if not sep or not name:
                    continue
                value = value.strip()
                if len(value) >= 2 and value[0] == value[-1] == '"':
                    value = value[1:-1]
                pairs.append((name, value))
        return pairs

    @property
    def locale(self) -> Optional[str]:
        """Preferred language of Accept-Language by quality, else the default locale."""
        ranges: List[Tuple[float, int, str]] = []
        for header in self.header("accept-language"):
            for item in header.split(","):
                tag, _, params = item.strip().partition(";")
                tag = tag.strip()
                if not tag or tag == "*":
                    continue
                quality = 1.0
                params = params.strip()
                if params.startswith("q="):
                    try:
                        quality = float(params[2:])
                    except ValueError:
                        continue
                if not math.isfinite(quality) or not 0 < quality <= 1:
                    continue
                ranges.append((-quality, len(ranges), tag))
        if not ranges:
            return self.default_locale
        return min(ranges)[2]

    def content_type(self) -> MediaType:
        """
        Parsed Content-Type; a missing header reads as application/octet-stream.

        Raises:
            UnsupportedMediaTypeError: the header cannot be parsed
        """
        header = self.first_header("content-type")
        if header is None or not header.strip():
            return APPLICATION_OCTET_STREAM
        try:
            return MediaType.parse(header)
        except InvalidMediaTypeError as exc:
            raise UnsupportedMediaTypeError(header, READABLE_MEDIA_TYPES) from exc

    def body_as(self, model: Type[ModelT]) -> ModelT:
        """
        Decode the body as JSON into ``model``.

        Raises:
            UnsupportedMediaTypeError: Content-Type is not a JSON type
            ServerWebInputError: the body is not valid for ``model``
        """
        content_type = self.content_type()
        if not any(readable.includes(content_type) for readable in READABLE_MEDIA_TYPES):
            raise UnsupportedMediaTypeError(self.first_header("content-type"), READABLE_MEDIA_TYPES)

        try:
            text = self.body.decode(content_type.charset or "utf-8")
        except (LookupError, UnicodeDecodeError) as exc:
            raise ServerWebInputError("Failed to read request body", exc) from exc

        try:
            return model.model_validate_json(text)
        except ValidationError as exc:
            raise ServerWebInputError("Failed to read request body", exc) from exc

    def mutate(self, content_type: Optional[MediaType] = None, body: Optional[bytes] = None) -> "ServerRequest":
        """Copy of this request with Content-Type and/or body replaced."""
        headers: List[Tuple[str, str]] = list(self.raw_headers)
        if content_type is not None:
            headers = [(name, value) for name, value in headers if name != "content-type"]
            headers.append(("content-type", str(content_type)))
        return ServerRequest(
            uri=self.uri,
            headers=headers,
            body=self.body if body is None else body,
            attributes=self.attributes,
            default_locale=self.default_locale,
        )


def init_cookies(request: ServerRequest) -> Dict[str, List[HttpCookie]]:
    """Group the request cookies by name, keeping duplicates and their order."""
    cookies: Dict[str, List[HttpCookie]] = {}
    for name, value in request.cookies():
        cookies.setdefault(name, []).append(HttpCookie(name, value))
    return cookies
