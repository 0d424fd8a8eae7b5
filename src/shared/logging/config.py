"""Logger configuration.

Loguru-based structured logging configuration.

This module configures a unified logger for the application:
- Loguru for application logs (pretty format, colors, structured data)
- Intercept handler for third-party library logs (uvicorn, fastapi, sqlalchemy)
- Request correlation IDs injected from context variables
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger

from src.shared.context import get_request_id, get_trace_id

if TYPE_CHECKING:
    from src.core.config import Settings

# Sensitive field patterns for redaction
SENSITIVE_PATTERNS = re.compile(
    r"(password|token|secret|key|auth|credential)",
    re.IGNORECASE,
)

# Fields rendered at the top level of JSON entries
_EXCLUDED_EXTRA = {"trace_id", "request_id", "name"}

_settings_cache: Settings | None = None


def _get_settings() -> Settings:
    """Get settings lazily to avoid circular imports."""
    global _settings_cache
    if _settings_cache is None:
        from src.core.config import settings
        _settings_cache = settings
    return _settings_cache


class InterceptHandler(logging.Handler):
    """Redirect standard logging records to Loguru.

    uvicorn, fastapi and sqlalchemy log through the standard logging module;
    this handler keeps all output in one format.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """Forward a single stdlib record to Loguru.

        Args:
            record: Log record from standard logging.
        """
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)

        frame = logging.currentframe()
        depth = 2

        if frame:
            while frame.f_code.co_filename == logging.__file__:
                if frame.f_back:
                    frame = frame.f_back
                    depth += 1
                else:
                    break

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _context_patcher(record: dict[str, Any]) -> None:
    """Attach request correlation IDs to every record."""
    record["extra"].setdefault("request_id", get_request_id())
    record["extra"].setdefault("trace_id", get_trace_id())


def _redact_sensitive_value(key: str, value: Any) -> Any:
    """Redact a value when its key looks sensitive."""
    if SENSITIVE_PATTERNS.search(key):
        return "***REDACTED***"
    return value


def _build_entry(record: dict[str, Any], service_name: str) -> dict[str, Any]:
    """Build the JSON log entry for a Loguru record."""
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["extra"].get("name", record["name"]),
        "function": record["function"],
        "line": record["line"],
        "request_id": record["extra"].get("request_id", ""),
        "trace_id": record["extra"].get("trace_id", ""),
        "service": service_name,
    }

    for key, value in record["extra"].items():
        if key not in _EXCLUDED_EXTRA:
            log_entry[key] = _redact_sensitive_value(key, value)

    if record.get("exception"):
        exc = record["exception"]
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return log_entry


def json_formatter(record: dict[str, Any]) -> str:
    """Render a record as one JSON line.

    Args:
        record: Loguru log record

    Returns:
        JSON-formatted log string with newline
    """
    entry = _build_entry(record, _get_settings().app.name)
    return json.dumps(entry, ensure_ascii=False, default=str) + "\n"


def _create_json_sink(service_name: str) -> Any:
    """Create a JSON sink writing to stdout."""

    def json_sink(message: Any) -> None:
        entry = _build_entry(message.record, service_name)
        sys.stdout.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")
        sys.stdout.flush()

    return json_sink


def setup_logger() -> None:
    """Configure Loguru logger.

    Sets up:
    - Console handler with colored output (dev) or JSON format (prod)
    - Request correlation via context variables
    - Third-party library log interception
    """
    settings = _get_settings()

    logger.remove()
    logger.configure(patcher=_context_patcher)

    is_prod = settings.logging.format.lower() == "json"

    if is_prod:
        logger.add(
            _create_json_sink(settings.app.name),
            level=settings.logging.level.upper(),
            backtrace=True,
            diagnose=False,  # Don't expose internal state in production
            enqueue=True,
        )
    else:
        dev_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level> | "
            "<dim>request_id={extra[request_id]}</dim>"
        )
        logger.add(
            sys.stdout,
            format=dev_format,
            level=settings.logging.level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=settings.app.debug,
            enqueue=True,
        )

    configure_third_party_loggers()

    logger.info(
        "Logger configured",
        level=settings.logging.level,
        format="json" if is_prod else "console",
    )


def configure_third_party_loggers() -> None:
    """Route third-party loggers through Loguru and tame their verbosity."""
    settings = _get_settings()

    logging.root.handlers = []
    logging.root.setLevel(logging.INFO)

    loggers_to_configure = [
        "",  # root logger
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "fastapi",
        "asyncpg",
        "sqlalchemy",
        "sqlalchemy.engine",
    ]

    is_prod = settings.logging.format.lower() == "json"

    for logger_name in loggers_to_configure:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers.clear()
        logging_logger.addHandler(InterceptHandler())
        logging_logger.propagate = False

        if logger_name in ["uvicorn.access", "asyncpg"]:
            logging_logger.setLevel(logging.WARNING if is_prod else logging.INFO)
        elif logger_name in ["sqlalchemy", "sqlalchemy.engine"]:
            logging_logger.setLevel(logging.WARNING)
        else:
            logging_logger.setLevel(logging.INFO)

    logger.debug("Third-party loggers configured")


def get_logger(name: str):
    """Get a logger with the specified name.

    Args:
        name: Logger name (usually __name__ of the module)

    Returns:
        Loguru logger with bound name
    """
    return logger.bind(name=name)
