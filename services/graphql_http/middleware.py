"""
Where: services/graphql_http/middleware.py
What: HTTP middleware for trace propagation and access logging.
Why: Isolate cross-cutting request concerns from app assembly.
"""

import logging
import time

from fastapi import Request

from services.common.core.request_context import clear_trace_id, set_trace_id
from services.common.core.trace import TraceId

logger = logging.getLogger("graphql_http.access")

TRACE_HEADER = "X-Trace-Id"
REQUEST_ID_HEADER = "X-Request-Id"


async def trace_propagation_middleware(request: Request, call_next):
    """Middleware for Trace ID propagation and structured access logging."""
    start_time = time.perf_counter()

    trace_id_str = request.headers.get(TRACE_HEADER)
    if trace_id_str:
        try:
            trace_id_str = set_trace_id(trace_id_str)
        except ValueError as exc:
            logger.warning(
                "Failed to parse incoming %s: '%s', error: %s",
                TRACE_HEADER,
                trace_id_str,
                exc,
            )
            trace_id_str = set_trace_id(str(TraceId.generate()))
    else:
        trace_id_str = set_trace_id(str(TraceId.generate()))

    try:
        response = await call_next(request)
        response.headers[TRACE_HEADER] = trace_id_str

        # Set by the GraphQL handler once the request has been decoded.
        req_id = getattr(request.state, "request_id", None)
        if req_id:
            response.headers[REQUEST_ID_HEADER] = req_id

        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)

        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "trace_id": trace_id_str,
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "latency_ms": process_time_ms,
                "user_agent": request.headers.get("user-agent"),
                "client_ip": request.client.host if request.client else None,
            },
        )

        return response
    finally:
        clear_trace_id()
