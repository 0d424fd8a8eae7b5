"""Domain error types.

Each class carries the HTTP status the boundary layer should answer with;
the class itself is the error classification hint.
"""

from collections.abc import Iterable
from typing import Any, Self

from .aggregation import DEFAULT_DELIMITER, FieldError, join_errors, sort_errors, split_errors
from .base import AppError


class ValidationError(AppError):
    """Input validation error."""

    status_code = 400

    def __init__(
        self,
        field_errors: Iterable[FieldError],
        *,
        delimiter: str = DEFAULT_DELIMITER,
    ) -> None:
        self.field_errors = sort_errors(split_errors(field_errors))
        if not self.field_errors:
            raise ValueError("ValidationError requires at least one field error")
        super().__init__(
            message=join_errors(self.field_errors, delimiter),
            details={"errors": [e.to_dict() for e in self.field_errors]},
        )

    @classmethod
    def single(cls, field: str, message: str) -> Self:
        return cls([FieldError(field, message)])


class NotFoundError(AppError):
    """Resource not found."""

    status_code = 404

    @classmethod
    def for_identity(cls, resource: str, identity: dict[str, Any]) -> Self:
        return cls(
            message=f"{resource} not found",
            details={"resource_type": resource, "identity": identity},
        )


class PersistenceError(AppError):
    """The store rejected the operation."""

    status_code = 500


class ConflictError(PersistenceError):
    """Resource conflict or duplicate."""

    status_code = 409


class BadReferenceError(PersistenceError):
    """Referenced record does not exist."""

    status_code = 400


class ServiceUnavailableError(PersistenceError):
    """Database is unavailable."""

    status_code = 503


class ProgrammingError(AppError):
    """Caller contract violation."""

    status_code = 500
