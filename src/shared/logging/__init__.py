"""Shared logging configuration.

Loguru-based logging module with:
- Structured JSON logging for production
- Colored console output for development
- Request ID correlation
- Automatic sensitive data redaction
"""

from loguru import logger

from .config import (
    InterceptHandler,
    configure_third_party_loggers,
    get_logger,
    json_formatter,
    setup_logger,
)
from .event_logger import (
    log_crud_completed,
    log_crud_failed,
    log_crud_started,
    log_transaction_closed,
)

__all__ = [
    # Core logging
    "logger",
    "setup_logger",
    "get_logger",
    "json_formatter",
    "InterceptHandler",
    "configure_third_party_loggers",
    # Event logging
    "log_crud_started",
    "log_crud_completed",
    "log_crud_failed",
    "log_transaction_closed",
]
