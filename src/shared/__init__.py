"""
Shared module - cross-cutting concerns and the generic CRUD core.

- Context variables for request/trace IDs
- Logging utilities with Loguru
- Field validation engine
- Transactional request context and the CRUD dispatcher
"""

from .context import (
    bind_request,
    clear_request,
    get_request_id,
    get_trace_id,
    request_id_var,
    trace_id_var,
)
from .logging import get_logger, logger, setup_logger

__all__ = [
    # Context
    "bind_request",
    "clear_request",
    "get_request_id",
    "get_trace_id",
    "request_id_var",
    "trace_id_var",
    # Logging
    "logger",
    "setup_logger",
    "get_logger",
]
