"""
RequestContext management.
Use ContextVar to share the trace id and GraphQL request id across async execution.
"""

from contextvars import ContextVar
from typing import Optional

from .trace import TraceId


# Context variable for Trace ID (full header format).
_trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)
# Context variable for the id of the GraphQL request being executed.
_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_trace_id() -> Optional[str]:
    """Get the current Trace ID."""
    return _trace_id_var.get()


def get_request_id() -> Optional[str]:
    """Get the current Request ID."""
    return _request_id_var.get()


def set_request_id(request_id: str) -> str:
    """
    Publish an already generated Request ID for the current context.

    Log records emitted afterwards in the same task carry it.
    """
    _request_id_var.set(request_id)
    return request_id


def set_trace_id(trace_id_str: str) -> str:
    """
    Set the Trace ID.

    Args:
        trace_id_str: X-Trace-Id header string

    Returns:
        The normalized Trace ID string that was set

    Raises:
        ValueError: if the header carries no usable root id
    """
    trace = TraceId.parse(trace_id_str)
    _trace_id_var.set(str(trace))
    return str(trace)


def clear_trace_id() -> None:
    """Clear the Trace ID and Request ID context."""
    _trace_id_var.set(None)
    _request_id_var.set(None)
