"""Shared errors package.

Error taxonomy, field error aggregation and HTTP error rendering.
"""

from .aggregation import (
    DEFAULT_DELIMITER,
    FieldError,
    join_errors,
    render_errors,
    sort_errors,
    split_errors,
)
from .base import AppError
from .decorators import safe
from .domain import (
    BadReferenceError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    ProgrammingError,
    ServiceUnavailableError,
    ValidationError,
)
from .handlers import setup_exception_handlers
from .mapping import ExceptionMapper
from .schemas import ErrorDetail, ErrorResponse

__all__ = [
    # Base
    "AppError",
    # Domain errors
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "ConflictError",
    "BadReferenceError",
    "ServiceUnavailableError",
    "ProgrammingError",
    # Aggregation
    "DEFAULT_DELIMITER",
    "FieldError",
    "split_errors",
    "sort_errors",
    "join_errors",
    "render_errors",
    # Mapping
    "ExceptionMapper",
    "safe",
    # Handlers
    "setup_exception_handlers",
    # Schemas
    "ErrorDetail",
    "ErrorResponse",
]
