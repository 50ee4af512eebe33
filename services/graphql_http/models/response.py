"""
GraphQL response model returned by a GraphQL handler.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

_UNSET: Any = object()


class WebGraphQlResponse:
    """
    Result of executing a GraphQL request plus the HTTP headers to send with it.

    ``data`` is tracked separately from ``None`` so that an execution that
    produced ``"data": null`` can be told apart from one that never started.
    """

    def __init__(
        self,
        data: Any = _UNSET,
        errors: Optional[Sequence[Mapping[str, Any]]] = None,
        extensions: Optional[Mapping[str, Any]] = None,
        response_headers: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        self._data = data
        self.errors: List[Dict[str, Any]] = [dict(error) for error in errors or ()]
        self.extensions: Dict[str, Any] = dict(extensions or {})
        self.response_headers: Dict[str, Tuple[str, ...]] = {
            name: (values,) if isinstance(values, str) else tuple(values)
            for name, values in (response_headers or {}).items()
        }

    @classmethod
    def from_map(
        cls, payload: Mapping[str, Any], response_headers: Optional[Mapping[str, Sequence[str]]] = None
    ) -> "WebGraphQlResponse":
        """Build from a GraphQL response body as produced by an execution service."""
        return cls(
            data=payload["data"] if "data" in payload else _UNSET,
            errors=payload.get("errors"),
            extensions=payload.get("extensions"),
            response_headers=response_headers,
        )

    @property
    def data(self) -> Any:
        return None if self._data is _UNSET else self._data

    def is_data_present(self) -> bool:
        return self._data is not _UNSET

    def to_map(self) -> Dict[str, Any]:
        """Serialize to the GraphQL response shape: data, errors, extensions."""
        result: Dict[str, Any] = {}
        if self.is_data_present():
            result["data"] = self._data
        if self.errors:
            result["errors"] = self.errors
        if self.extensions:
            result["extensions"] = self.extensions
        return result

    def __repr__(self) -> str:
        return f"WebGraphQlResponse({self.to_map()!r})"
