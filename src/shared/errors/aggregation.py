"""Field-scoped error aggregation.

Validation produces an unordered bag of ``FieldError``s, sometimes bundled
into composite errors. Before anything reaches a client the bag is split into
atoms, sorted, and joined into one string, so that identical input always
renders byte-identical output.
"""

from collections.abc import Iterable
from typing import Any, NamedTuple

DEFAULT_DELIMITER = ", "


class FieldError(NamedTuple):
    """A single violation attributed to one public field name."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"'{self.field}' {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


def split_errors(errors: Iterable[Any] | Any) -> list[FieldError]:
    """Decompose composite failures into atomic field errors.

    Accepts ``FieldError``s, objects exposing ``field_errors`` (such as the
    domain ``ValidationError``), ``(field, message)`` pairs and arbitrarily
    nested iterables of those. ``None`` yields nothing.
    """
    if errors is None:
        return []
    if isinstance(errors, FieldError):
        return [errors]
    nested = getattr(errors, "field_errors", None)
    if nested is not None:
        return split_errors(nested)
    if isinstance(errors, tuple) and len(errors) == 2 and all(isinstance(e, str) for e in errors):
        return [FieldError(*errors)]
    if isinstance(errors, (str, bytes)):
        raise TypeError(f"Cannot split a bare string into field errors: {errors!r}")

    result: list[FieldError] = []
    for item in errors:
        result.extend(split_errors(item))
    return result


def sort_errors(errors: Iterable[FieldError]) -> list[FieldError]:
    """Order errors by field name, then message, for a total order."""
    return sorted(errors, key=lambda e: (e.field, e.message))


def join_errors(errors: Iterable[FieldError], delimiter: str = DEFAULT_DELIMITER) -> str:
    """Render errors as ``'<field>' <message>`` joined with ``delimiter``."""
    return delimiter.join(str(e) for e in errors)


def render_errors(errors: Iterable[Any] | Any, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Split, sort and join in one go."""
    return join_errors(sort_errors(split_errors(errors)), delimiter)
