"""Declarative field validation.

A resource declares its rules once::

    validator = Validator(
        Required("name"),
        Matches("name", NAME_PATTERN, INVALID_CHARACTERS),
        InRange("latitude", -90, 90, "Must be a floating point number within the range +-90"),
        TypeInCategory("type_id", "cachegroup"),
    )

``Validator.validate`` evaluates every rule against the entity and returns all
failures; nothing short-circuits. Rules that read from the store get the
request's ``Transaction`` and must only query through it.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Collection
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from sqlalchemy import func, select

from src.shared.errors import FieldError

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute

    from src.shared.transaction import Transaction

BLANK = "cannot be blank"


class Rule(ABC):
    """One predicate bound to one entity field."""

    #: Whether the rule runs when the field is absent (None).
    applies_when_absent: bool = False

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message

    @abstractmethod
    async def passes(self, value: Any, entity: BaseModel, tx: Transaction | None) -> bool:
        """Return True when ``value`` satisfies the rule."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field!r})"


class Required(Rule):
    applies_when_absent = True

    def __init__(self, field: str, message: str = BLANK) -> None:
        super().__init__(field, message)

    async def passes(self, value: Any, entity: BaseModel, tx: Transaction | None) -> bool:
        if value is None:
            return False
        if isinstance(value, str):
            return value.strip() != ""
        return True


class Predicate(Rule):
    """Rule backed by a plain callable; the building block for pure checks."""

    def __init__(self, field: str, check: Callable[[Any], bool], message: str) -> None:
        super().__init__(field, message)
        self._check = check

    async def passes(self, value: Any, entity: BaseModel, tx: Transaction | None) -> bool:
        return bool(self._check(value))


class InRange(Predicate):
    """Inclusive numeric range."""

    def __init__(self, field: str, low: float, high: float, message: str) -> None:
        self.low = low
        self.high = high
        super().__init__(field, self._in_range, message)

    def _in_range(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, int | float):
            return False
        return self.low <= value <= self.high


class Matches(Predicate):
    """Full-match against a regular expression."""

    def __init__(self, field: str, pattern: str | re.Pattern[str], message: str) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        super().__init__(field, lambda v: self.pattern.fullmatch(str(v)) is not None, message)


class Length(Predicate):
    def __init__(self, field: str, min_len: int, max_len: int, message: str | None = None) -> None:
        super().__init__(
            field,
            lambda v: min_len <= len(v) <= max_len,
            message or f"the length must be between {min_len} and {max_len}",
        )


class OneOf(Predicate):
    def __init__(self, field: str, choices: Collection[Any], message: str | None = None) -> None:
        super().__init__(field, lambda v: v in choices, message or "must be a valid value")


class Exists(Rule):
    """Referential existence: ``column == value`` matches at least one row."""

    def __init__(self, field: str, column: InstrumentedAttribute[Any], message: str) -> None:
        super().__init__(field, message)
        self.column = column

    async def passes(self, value: Any, entity: BaseModel, tx: Transaction | None) -> bool:
        if tx is None:
            raise RuntimeError(f"{self!r} needs a transaction to query")
        stmt = select(func.count()).select_from(self.column.class_).where(self.column == value)
        count = await tx.scalar(stmt)
        return bool(count)


class Validator:
    """An ordered set of rules evaluated together."""

    def __init__(self, *rules: Rule) -> None:
        self.rules = list(rules)

    def __iter__(self):
        return iter(self.rules)

    async def validate(self, entity: BaseModel, tx: Transaction | None = None) -> list[FieldError]:
        """Evaluate every rule and collect all failures.

        Absent fields (None or a blank string) are skipped unless the rule
        asks to see them (``Required``), so a blank field reports only
        ``cannot be blank``. Errors are attributed to the field's public (alias)
        name. The result is in rule order; callers sort before rendering.
        """
        errors: list[FieldError] = []
        for rule in self.rules:
            value = getattr(entity, rule.field)
            if _is_absent(value) and not rule.applies_when_absent:
                continue
            if not await rule.passes(value, entity, tx):
                errors.append(FieldError(public_name(entity, rule.field), rule.message))
        return errors


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def public_name(entity: BaseModel, field: str) -> str:
    """Name of ``field`` as clients see it in JSON."""
    info = type(entity).model_fields.get(field)
    if info is not None and info.alias:
        return info.alias
    return field
