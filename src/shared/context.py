"""
Context variables for request correlation.

The request tracing middleware fills these in; loggers and error responses
read them back without having the request object at hand.
"""

import uuid
from contextvars import ContextVar

trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_trace_id() -> str:
    """Get current trace ID, or an empty string outside a request."""
    return trace_id_var.get()


def get_request_id() -> str:
    """Get current request ID, or an empty string outside a request."""
    return request_id_var.get()


def bind_request(request_id: str | None = None, trace_id: str | None = None) -> str:
    """Bind correlation IDs for the current request.

    Args:
        request_id: Incoming request ID; a new one is generated when missing.
        trace_id: Upstream trace ID; falls back to the request ID.

    Returns:
        The request ID that was bound.
    """
    request_id = request_id or uuid.uuid4().hex
    request_id_var.set(request_id)
    trace_id_var.set(trace_id or request_id)
    return request_id


def clear_request() -> None:
    """Reset correlation IDs after the request finished."""
    request_id_var.set("")
    trace_id_var.set("")
