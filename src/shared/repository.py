"""Table-backed resources with SQL statements built from ORM models.

Most configuration entities map onto a single table with an integer ``id``
and a ``last_updated`` timestamp. ``TableResource`` implements the four
operations once for that shape; a concrete resource supplies its model, its
SELECT (with joins for derived fields) and its writable columns, and may
override any of the statement builders.
"""

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from sqlalchemy import Delete, Insert, Select, Update, delete, insert, update

from src.core.database import Base
from src.shared.errors import NotFoundError, PersistenceError, safe
from src.shared.resource import EntityT, Resource


class TableResource(Resource[EntityT]):
    """Resource persisted in one table keyed by ``id``.

    Example:
        class CDNResource(TableResource[CDNSchema]):
            key = "cdns"
            name = "cdn"
            schema = CDNSchema
            model = CDN
            writable_fields = frozenset({"name", "domain_name", "dnssec_enabled"})

            def select_query(self) -> Select:
                return select(CDN.id, CDN.name, CDN.domain_name, ...)
    """

    model: ClassVar[type[Base]]
    writable_fields: ClassVar[frozenset[str]]
    #: Fields filled by joins in ``select_query``; never taken from clients.
    derived_fields: ClassVar[frozenset[str]] = frozenset()

    # ---- statements ----

    @abstractmethod
    def select_query(self) -> Select:
        """SELECT returning every schema field, derived ones included."""

    def insert_query(self) -> Insert:
        return insert(self.model).returning(self.model.id, self.model.last_updated)  # type: ignore[attr-defined]

    def update_query(self) -> Update:
        return update(self.model).returning(self.model.last_updated)  # type: ignore[attr-defined]

    def delete_query(self) -> Delete:
        return delete(self.model)

    def _id_column(self) -> Any:
        return self.model.id  # type: ignore[attr-defined]

    def _clear_derived(self, entity: EntityT) -> None:
        for field in self.derived_fields:
            setattr(entity, field, None)

    def _values(self, *, exclude_none: bool) -> dict[str, Any]:
        return self._require_entity().model_dump(
            include=set(self.writable_fields),
            exclude_none=exclude_none,
        )

    # ---- operations ----

    @safe
    async def read(self, filters: Mapping[str, str]) -> list[EntityT]:
        query = self.apply_filters(self.select_query(), filters)
        rows = (await self.tx.execute(query)).mappings().all()
        return [self.schema.model_validate(dict(row)) for row in rows]  # type: ignore[misc]

    @safe
    async def create(self) -> EntityT:
        entity = self._require_entity()
        self._clear_derived(entity)
        stmt = self.insert_query().values(**self._values(exclude_none=True))
        row = (await self.tx.execute(stmt)).mappings().one()
        self.assign_identity(id=row["id"])
        entity.last_updated = row["last_updated"]  # type: ignore[attr-defined]
        return entity

    @safe
    async def update(self) -> EntityT:
        entity = self._require_entity()
        self._clear_derived(entity)
        stmt = (
            self.update_query()
            .where(self._id_column() == entity.id)  # type: ignore[attr-defined]
            .values(**self._values(exclude_none=False))
        )
        row = (await self.tx.execute(stmt)).mappings().first()
        if row is None:
            raise NotFoundError.for_identity(self.name, self.identify())
        entity.last_updated = row["last_updated"]  # type: ignore[attr-defined]
        return entity

    @safe
    async def delete(self) -> None:
        entity = self._require_entity()
        stmt = self.delete_query().where(self._id_column() == entity.id)  # type: ignore[attr-defined]
        result = await self.tx.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError.for_identity(self.name, self.identify())
        if result.rowcount != 1:
            raise PersistenceError(
                message=f"{self.name} delete affected {result.rowcount} rows",
            )
