"""Resource capability contract.

Every configuration entity type (cache groups, delivery services, CDNs, ...)
is exposed through a subclass of ``Resource``. The CRUD dispatcher only ever
talks to this interface, so adding an entity type never touches the
dispatcher.

Example:
    class CDNResource(Resource[CDNSchema]):
        key = "cdns"
        name = "cdn"
        schema = CDNSchema
        validator = Validator(Required("name"))

        async def read(self, filters): ...
        async def create(self): ...
        async def update(self): ...
        async def delete(self): ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select

from src.shared.errors import FieldError, ProgrammingError, ValidationError
from src.shared.transaction import Transaction
from src.shared.validation import Validator

EntityT = TypeVar("EntityT", bound=BaseModel)

Identity = dict[str, Any]

ORDER_BY_PARAM = "orderby"


@dataclass(frozen=True)
class FilterColumn:
    """Maps a query parameter onto a column, parsing the raw string first."""

    column: Any
    parse: Callable[[str], Any] = str
    message: str = "invalid value"


def parse_int(raw: str) -> int:
    return int(raw)


def parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValueError(raw)


class Resource(ABC, Generic[EntityT]):
    """Binds one entity (or none, for reads) to the CRUD operations.

    Subclasses set the class attributes and implement the four operations.
    Operations raise ``AppError`` subclasses on failure; they must never
    commit or roll back.
    """

    key: ClassVar[str]
    name: ClassVar[str]
    schema: ClassVar[type[BaseModel]]
    validator: ClassVar[Validator] = Validator()
    identity_fields: ClassVar[tuple[str, ...]] = ("id",)
    filter_columns: ClassVar[dict[str, FilterColumn]] = {}
    default_order: ClassVar[str | None] = None

    def __init__(self, tx: Transaction, entity: EntityT | None = None) -> None:
        self.tx = tx
        self.entity = entity

    # ---- identity ----

    def identify(self) -> Identity:
        """Stable key fields of the bound entity."""
        entity = self._require_entity()
        return {field: getattr(entity, field) for field in self.identity_fields}

    @property
    def has_identity(self) -> bool:
        return self.entity is not None and all(v is not None for v in self.identify().values())

    def assign_identity(self, **keys: Any) -> None:
        """Set generated key fields; an already assigned identity never changes."""
        entity = self._require_entity()
        for field, value in keys.items():
            current = getattr(entity, field)
            if current is not None and current != value:
                raise ProgrammingError(
                    message=f"{self.name} identity {field}={current!r} cannot be reassigned",
                )
            setattr(entity, field, value)

    # ---- validation ----

    async def validate(self) -> list[FieldError]:
        """Evaluate the declared rules against the bound entity."""
        return await self.validator.validate(self._require_entity(), self.tx)

    # ---- operations ----

    @abstractmethod
    async def read(self, filters: Mapping[str, str]) -> list[EntityT]:
        """Return all entities matching ``filters`` (all of them when empty)."""

    @abstractmethod
    async def create(self) -> EntityT:
        """Insert the bound entity and assign its identity."""

    @abstractmethod
    async def update(self) -> EntityT:
        """Update the row addressed by the bound entity's identity."""

    @abstractmethod
    async def delete(self) -> None:
        """Delete the row addressed by the bound entity's identity."""

    # ---- helpers for implementations ----

    def _require_entity(self) -> EntityT:
        if self.entity is None:
            raise ProgrammingError(message=f"{self.name} operation requires an entity")
        return self.entity

    def apply_filters(self, query: Select, filters: Mapping[str, str]) -> Select:
        """Translate query parameters into WHERE/ORDER BY clauses.

        Unknown parameters are ignored. Values that cannot be parsed are
        reported together as one ValidationError.
        """
        errors: list[FieldError] = []
        for param, raw in filters.items():
            column_filter = self.filter_columns.get(param)
            if column_filter is None:
                continue
            try:
                value = column_filter.parse(raw)
            except ValueError:
                errors.append(FieldError(param, column_filter.message))
                continue
            query = query.where(column_filter.column == value)

        if errors:
            raise ValidationError(errors)

        order_param = filters.get(ORDER_BY_PARAM) or self.default_order
        if order_param and order_param in self.filter_columns:
            query = query.order_by(self.filter_columns[order_param].column)
        return query
