"""Structured event logging for CRUD requests.

Type-safe logging helpers so every resource type reports its lifecycle
with the same event names and fields.
"""

from typing import Any

from loguru import logger


def log_crud_started(
    resource: str,
    operation: str,
    *,
    identity: dict[str, Any] | None = None,
) -> None:
    """Log the start of a CRUD operation.

    Args:
        resource: Resource key (e.g. "cachegroups")
        operation: One of read, create, update, delete
        identity: Key fields of the addressed entity, if any
    """
    logger.debug(
        "CRUD operation started",
        event="crud.started",
        resource=resource,
        operation=operation,
        identity=identity,
    )


def log_crud_completed(
    resource: str,
    operation: str,
    *,
    identity: dict[str, Any] | None = None,
    count: int | None = None,
) -> None:
    """Log a successful CRUD operation.

    Args:
        resource: Resource key
        operation: Operation name
        identity: Key fields of the affected entity
        count: Number of rows returned (reads only)
    """
    logger.info(
        "CRUD operation completed",
        event="crud.completed",
        resource=resource,
        operation=operation,
        identity=identity,
        count=count,
    )


def log_crud_failed(
    resource: str,
    operation: str,
    error: str,
    *,
    error_code: str | None = None,
    identity: dict[str, Any] | None = None,
) -> None:
    """Log a failed CRUD operation.

    Client-side failures (4xx codes) are warnings, everything else is an error.

    Args:
        resource: Resource key
        operation: Operation name
        error: Rendered error text
        error_code: Application error code
        identity: Key fields of the addressed entity
    """
    log_level = logger.warning if error_code in _CLIENT_ERROR_CODES else logger.error
    log_level(
        "CRUD operation failed",
        event="crud.failed",
        resource=resource,
        operation=operation,
        error=error,
        error_code=error_code,
        identity=identity,
    )


def log_transaction_closed(outcome: str, *, state: str) -> None:
    """Log the end of a request transaction.

    Args:
        outcome: "commit" or "rollback"
        state: State the request context was in before closing
    """
    logger.debug(
        "Request transaction closed",
        event="transaction.closed",
        outcome=outcome,
        state=state,
    )


_CLIENT_ERROR_CODES = frozenset({"VALIDATION", "NOT_FOUND", "CONFLICT", "BAD_REFERENCE"})
