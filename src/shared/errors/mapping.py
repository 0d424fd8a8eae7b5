"""Mapping of store errors to domain errors.

Resources never see raw driver exceptions leave their operations: the
``@safe`` decorator and the request context funnel them through here.
"""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import DatabaseError, IntegrityError, InterfaceError, OperationalError

from .base import AppError
from .domain import BadReferenceError, ConflictError, PersistenceError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class ExceptionMapper:
    """Centralized mapping of technical exceptions to domain exceptions."""

    _handlers: dict[type[Exception], Callable[[Exception, str], AppError]] = {}

    @classmethod
    def register(
        cls, *exception_types: type[Exception]
    ) -> Callable[[Callable[[Any, str], AppError]], Callable[[Any, str], AppError]]:
        """Register a handler for exception types.

        Usage:
            @ExceptionMapper.register(IntegrityError)
            def _handle_integrity_error(exc: IntegrityError, func_name: str) -> AppError:
                return ConflictError(message="Record already exists")
        """

        def decorator(
            handler: Callable[[Any, str], AppError]
        ) -> Callable[[Any, str], AppError]:
            for exc_type in exception_types:
                cls._handlers[exc_type] = handler
            return handler

        return decorator

    @classmethod
    def map(cls, exc: Exception, func_name: str = "") -> AppError:
        """Map a technical exception to a domain exception.

        Exact type matches win over inheritance matches, so a handler for
        ``IntegrityError`` is preferred over the one for ``DatabaseError``.
        """
        if isinstance(exc, AppError):
            return exc

        handler = cls._handlers.get(type(exc))
        if handler is None:
            for exc_type in type(exc).__mro__:
                handler = cls._handlers.get(exc_type)
                if handler is not None:
                    break

        if handler:
            return handler(exc, func_name)

        logger.exception(f"CRITICAL: Unhandled exception in {func_name}: {type(exc).__name__}")
        return PersistenceError(
            message="Internal server error",
            details={"function": func_name} if func_name else {},
        )


# --- Default handlers ---


@ExceptionMapper.register(IntegrityError)
def _handle_integrity_error(exc: IntegrityError, func_name: str) -> AppError:
    """Integrity constraint violation."""
    err_msg = str(exc).lower()
    if "unique" in err_msg or "duplicate" in err_msg:
        return ConflictError(
            message="Record already exists",
            details={"constraint": "unique"},
        )
    if "foreign key" in err_msg:
        return BadReferenceError(
            message="Related record not found",
            details={"constraint": "foreign_key"},
        )
    return PersistenceError(
        message="Database constraint violation",
        details={"constraint": "check"},
    )


@ExceptionMapper.register(OperationalError, InterfaceError)
def _handle_connection_error(exc: Exception, func_name: str) -> AppError:
    """Connection or operational error."""
    logger.error(f"Database unavailable in {func_name}: {exc}")
    return ServiceUnavailableError(
        message="Database temporarily unavailable",
        details={"service": "database"},
    )


@ExceptionMapper.register(DatabaseError)
def _handle_database_error(exc: Exception, func_name: str) -> AppError:
    """Any other error reported by the store."""
    logger.error(f"Database error in {func_name}: {exc}")
    return PersistenceError(message="Database error")
