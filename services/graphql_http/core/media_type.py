"""
Media type parsing and response content negotiation.

Covers the subset of RFC 7231 media type handling the gateway needs:
parsing Content-Type / Accept values, wildcard inclusion and the fixed set of
GraphQL response types.
"""

import string
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .exceptions import InvalidMediaTypeError

WILDCARD = "*"

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


def _split_outside_quotes(text: str, separator: str) -> List[str]:
    parts: List[str] = []
    current: List[str] = []
    quoted = False
    escaped = False
    for char in text:
        if escaped:
            escaped = False
        elif char == "\\" and quoted:
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == separator and not quoted:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _is_token(value: str) -> bool:
    return bool(value) and all(char in _TOKEN_CHARS for char in value)


class MediaType:
    """Immutable media type value: type, subtype and parameters."""

    __slots__ = ("type", "subtype", "parameters")

    def __init__(self, type_: str, subtype: str = WILDCARD, parameters: Optional[Mapping[str, str]] = None):
        self.type = type_.lower()
        self.subtype = subtype.lower()
        self.parameters: Dict[str, str] = {
            key.lower(): value for key, value in (parameters or {}).items()
        }

    @classmethod
    def parse(cls, value: str) -> "MediaType":
        """Parse a single media type such as ``application/json;charset=UTF-8``."""
        if value is None or not value.strip():
            raise InvalidMediaTypeError(value or "", "'mimeType' must not be empty")

        parts = _split_outside_quotes(value, ";")
        full_type = parts[0].strip()
        # java.net.HttpURLConnection sends a bare '*'.
        if full_type == WILDCARD:
            full_type = "*/*"

        if "/" not in full_type:
            raise InvalidMediaTypeError(value, "does not contain '/'")
        type_, _, subtype = full_type.partition("/")
        if not subtype:
            raise InvalidMediaTypeError(value, "does not contain subtype after '/'")
        if not _is_token(type_) or not _is_token(subtype):
            raise InvalidMediaTypeError(value, "type and subtype must be tokens")
        if type_ == WILDCARD and subtype != WILDCARD:
            raise InvalidMediaTypeError(value, "wildcard type is legal only in '*/*'")

        parameters: Dict[str, str] = {}
        for raw in parts[1:]:
            raw = raw.strip()
            if not raw:
                continue
            name, sep, param_value = raw.partition("=")
            if not sep or not _is_token(name.strip()):
                raise InvalidMediaTypeError(value, f"invalid parameter {raw!r}")
            parameters[name.strip()] = _unquote(param_value.strip())

        return cls(type_, subtype, parameters)

    @classmethod
    def parse_list(cls, header: Optional[str]) -> List["MediaType"]:
        """Parse a comma-separated header value, keeping the client's order."""
        if not header or not header.strip():
            return []
        return [cls.parse(item) for item in _split_outside_quotes(header, ",") if item.strip()]

    @property
    def charset(self) -> Optional[str]:
        return self.parameters.get("charset")

    @property
    def subtype_suffix(self) -> Optional[str]:
        """Structured syntax suffix, e.g. ``json`` for ``graphql-response+json``."""
        _, plus, suffix = self.subtype.rpartition("+")
        return suffix if plus and suffix else None

    def is_wildcard_type(self) -> bool:
        return self.type == WILDCARD

    def is_wildcard_subtype(self) -> bool:
        return self.subtype == WILDCARD or self.subtype.startswith("*+")

    def includes(self, other: "MediaType") -> bool:
        """Whether this type, wildcards included, covers ``other``. Parameters are ignored."""
        if other is None:
            return False
        if self.is_wildcard_type():
            return True
        if self.type != other.type:
            return False
        if self.subtype == other.subtype or self.subtype == WILDCARD:
            return True
        if self.is_wildcard_subtype():
            this_suffix = self.subtype_suffix
            if other.is_wildcard_subtype():
                return this_suffix == other.subtype_suffix
            return this_suffix is not None and this_suffix in (other.subtype, other.subtype_suffix)
        return False

    def is_compatible_with(self, other: "MediaType") -> bool:
        """Symmetric variant of :meth:`includes`."""
        return self.includes(other) or (other is not None and other.includes(self))

    def _parameter_key(self) -> Tuple[Tuple[str, str], ...]:
        items = []
        for key, value in self.parameters.items():
            items.append((key, value.lower() if key == "charset" else value))
        return tuple(sorted(items))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MediaType):
            return NotImplemented
        return (
            self.type == other.type
            and self.subtype == other.subtype
            and self._parameter_key() == other._parameter_key()
        )

    def __hash__(self) -> int:
        return hash((self.type, self.subtype, self._parameter_key()))

    def __str__(self) -> str:
        params = "".join(f";{key}={value}" for key, value in self.parameters.items())
        return f"{self.type}/{self.subtype}{params}"

    def __repr__(self) -> str:
        return f"MediaType({str(self)!r})"


APPLICATION_JSON = MediaType("application", "json")
APPLICATION_OCTET_STREAM = MediaType("application", "octet-stream")
APPLICATION_GRAPHQL_RESPONSE = MediaType("application", "graphql-response+json")
# Not a registered type, but older clients still send it.
APPLICATION_GRAPHQL = MediaType("application", "graphql")

# Response content types, in the order they are listed when negotiating.
SUPPORTED_MEDIA_TYPES: Tuple[MediaType, ...] = (
    APPLICATION_GRAPHQL_RESPONSE,
    APPLICATION_JSON,
    APPLICATION_GRAPHQL,
)

# Request content types the JSON body reader accepts.
READABLE_MEDIA_TYPES: Tuple[MediaType, ...] = (
    APPLICATION_JSON,
    MediaType("application", "*+json"),
)


def select_response_media_type(
    accept_header: Optional[str], supported: Iterable[MediaType] = SUPPORTED_MEDIA_TYPES
) -> MediaType:
    """
    Pick the response content type from the Accept header.

    The first accepted type, in the order the client listed them, that is a
    member of ``supported`` wins. Anything else, including an unparseable
    header, falls back to ``application/json``.
    """
    try:
        accepted_types = MediaType.parse_list(accept_header)
    except InvalidMediaTypeError:
        return APPLICATION_JSON

    supported = tuple(supported)
    for accepted in accepted_types:
        if accepted in supported:
            return accepted
    return APPLICATION_JSON
