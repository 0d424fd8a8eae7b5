"""Unit tests for CrudDispatcher: validation, atomicity and error mapping."""

from typing import Any

import pytest
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from src.modules.cachegroups import CacheGroupResource, CacheGroupSchema
from src.modules.deliveryservices import DeliveryServiceResource, DeliveryServiceSchema
from src.shared.crud import CrudDispatcher
from src.shared.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ProgrammingError,
    ValidationError,
)
from src.shared.resource import Resource

EDGE_TYPE = {"name": "EDGE_LOC", "use_in_table": "cachegroup"}


def cachegroup(**overrides: Any) -> CacheGroupSchema:
    values = {
        "name": "denver",
        "short_name": "den",
        "latitude": 39.7,
        "longitude": -104.9,
        "type_id": 1,
    }
    values.update(overrides)
    return CacheGroupSchema(**values)


def writes(session) -> list[str]:
    return [str(s) for s in session.statements if not str(s).startswith("SELECT")]


class _Exploding(Resource[BaseModel]):
    """Resource whose writes fail with an unexpected error."""

    key = "explosions"
    name = "explosion"
    schema = CacheGroupSchema

    async def read(self, filters):
        return []

    async def create(self):
        raise RuntimeError("driver bug")

    async def update(self):
        raise RuntimeError("driver bug")

    async def delete(self):
        raise RuntimeError("driver bug")


class TestCreate:
    """Tests for create."""

    @pytest.mark.asyncio
    async def test_validation_failure_never_writes(self, scripted_session, result_factory):
        session = scripted_session(results=[result_factory([EDGE_TYPE])])
        entity = cachegroup(name="bad!name", latitude=-190.0)

        with pytest.raises(ValidationError) as exc_info:
            async with CrudDispatcher.open(lambda: session) as crud:
                await crud.create(CacheGroupResource(crud.tx, entity))

        assert exc_info.value.message == (
            "'latitude' Must be a floating point number within the range +-90, "
            "'name' invalid characters found - Use alphanumeric . or - or _ ."
        )
        assert writes(session) == []
        assert session.commits == 0
        assert session.rollbacks == 1
        assert session.closed
        assert entity.id is None

    @pytest.mark.asyncio
    async def test_success_commits_and_assigns_identity(
        self, scripted_session, result_factory, last_updated
    ):
        session = scripted_session(
            results=[
                result_factory([EDGE_TYPE]),
                result_factory([{"id": 7, "last_updated": last_updated}]),
            ]
        )
        entity = cachegroup()

        async with CrudDispatcher.open(lambda: session) as crud:
            created = await crud.create(CacheGroupResource(crud.tx, entity))

        assert created.id == 7
        assert created.last_updated == last_updated
        assert session.commits == 1
        assert session.rollbacks == 0
        assert len(session.applied) == 1
        assert str(session.applied[0]).startswith("INSERT INTO cachegroup")

    @pytest.mark.asyncio
    async def test_store_failure_rolls_back(self, scripted_session, result_factory):
        duplicate = IntegrityError(
            "INSERT", {}, Exception('duplicate key value violates unique constraint "cachegroup_name_key"')
        )
        session = scripted_session(results=[result_factory([EDGE_TYPE]), duplicate])

        with pytest.raises(ConflictError):
            async with CrudDispatcher.open(lambda: session) as crud:
                await crud.create(CacheGroupResource(crud.tx, cachegroup()))

        assert session.commits == 0
        assert session.rollbacks == 1
        assert session.applied == []

    @pytest.mark.asyncio
    async def test_unexpected_error_is_mapped(self, scripted_session):
        session = scripted_session()

        with pytest.raises(PersistenceError) as exc_info:
            async with CrudDispatcher.open(lambda: session) as crud:
                await crud.create(_Exploding(crud.tx, cachegroup()))

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert session.commits == 0
        assert session.rollbacks == 1


    @pytest.mark.asyncio
    async def test_derived_fields_are_not_taken_from_client(
        self, scripted_session, result_factory, last_updated
    ):
        session = scripted_session(
            results=[
                result_factory([EDGE_TYPE]),
                result_factory([{"id": 7, "last_updated": last_updated}]),
            ]
        )
        entity = cachegroup(
            type="MID_LOC_FAKE",
            parent_cachegroup_name="ghost",
            secondary_parent_cachegroup_name="phantom",
        )

        async with CrudDispatcher.open(lambda: session) as crud:
            created = await crud.create(CacheGroupResource(crud.tx, entity))

        assert created.type is None
        assert created.parent_cachegroup_name is None
        assert created.secondary_parent_cachegroup_name is None

class TestRead:
    """Tests for read."""

    @pytest.mark.asyncio
    async def test_read_returns_every_row(self, scripted_session, result_factory):
        rows = [
            {"id": 1, "name": "cachegroup1", "short_name": "cg1", "type_id": 1, "type": "EDGE_LOC"},
            {"id": 1, "name": "cachegroup2", "short_name": "cg2", "type_id": 1, "type": "EDGE_LOC"},
        ]
        session = scripted_session(results=[result_factory(rows)])

        async with CrudDispatcher.open(lambda: session) as crud:
            items = await crud.read(CacheGroupResource(crud.tx), {"id": "1"})

        assert [item.name for item in items] == ["cachegroup1", "cachegroup2"]
        assert items[0].type == "EDGE_LOC"
        # Reads never commit
        assert session.commits == 0
        assert session.rollbacks == 1

    @pytest.mark.asyncio
    async def test_no_match_is_empty_list(self, scripted_session, result_factory):
        session = scripted_session(results=[result_factory([])])

        async with CrudDispatcher.open(lambda: session) as crud:
            items = await crud.read(CacheGroupResource(crud.tx), {})

        assert items == []

    @pytest.mark.asyncio
    async def test_unparsable_filter_is_a_validation_error(self, scripted_session):
        session = scripted_session()

        with pytest.raises(ValidationError) as exc_info:
            async with CrudDispatcher.open(lambda: session) as crud:
                await crud.read(CacheGroupResource(crud.tx), {"id": "one", "typeId": "x"})

        assert exc_info.value.message == "'id' must be an integer, 'typeId' must be an integer"
        assert session.statements == []


    @pytest.mark.asyncio
    async def test_filter_errors_use_configured_delimiter(self, scripted_session):
        session = scripted_session()

        with pytest.raises(ValidationError) as exc_info:
            async with CrudDispatcher.open(lambda: session, error_delimiter="; ") as crud:
                await crud.read(CacheGroupResource(crud.tx), {"id": "a", "typeId": "b"})

        assert exc_info.value.message == "'id' must be an integer; 'typeId' must be an integer"
        assert session.rollbacks == 1

class TestUpdate:
    """Tests for update."""

    @pytest.mark.asyncio
    async def test_update_refreshes_last_updated(
        self, scripted_session, result_factory, last_updated
    ):
        session = scripted_session(
            results=[
                result_factory([EDGE_TYPE]),
                result_factory([{"last_updated": last_updated}]),
            ]
        )

        async with CrudDispatcher.open(lambda: session) as crud:
            updated = await crud.update(CacheGroupResource(crud.tx, cachegroup(id=3)))

        assert updated.last_updated == last_updated
        assert session.commits == 1
        assert str(session.applied[0]).startswith("UPDATE cachegroup")

    @pytest.mark.asyncio
    async def test_update_missing_row_is_not_found(self, scripted_session, result_factory):
        session = scripted_session(results=[result_factory([EDGE_TYPE]), result_factory([])])

        with pytest.raises(NotFoundError) as exc_info:
            async with CrudDispatcher.open(lambda: session) as crud:
                await crud.update(CacheGroupResource(crud.tx, cachegroup(id=99)))

        assert exc_info.value.details["identity"] == {"id": 99}
        assert session.commits == 0
        assert session.rollbacks == 1

    @pytest.mark.asyncio
    async def test_update_without_identity(self, scripted_session):
        session = scripted_session()

        with pytest.raises(ProgrammingError):
            async with CrudDispatcher.open(lambda: session) as crud:
                await crud.update(CacheGroupResource(crud.tx, cachegroup()))

        assert session.untouched


    @pytest.mark.asyncio
    async def test_update_drops_client_supplied_names(
        self, scripted_session, result_factory, last_updated
    ):
        http_type = {"name": "HTTP", "use_in_table": "deliveryservice"}
        session = scripted_session(
            results=[result_factory([http_type]), result_factory([{"last_updated": last_updated}])],
            scalars=[1],
        )
        entity = DeliveryServiceSchema(
            id=2,
            xml_id="demo1",
            display_name="Demo 1",
            active=True,
            cdn_id=1,
            cdn_name="not-the-real-cdn",
            type_id=3,
            type="DNS",
            dscp=0,
        )

        async with CrudDispatcher.open(lambda: session) as crud:
            updated = await crud.update(DeliveryServiceResource(crud.tx, entity))

        assert updated.cdn_name is None
        assert updated.type is None

class TestDelete:
    """Tests for delete."""

    @pytest.mark.asyncio
    async def test_delete_without_identity_touches_nothing(self, scripted_session):
        session = scripted_session()

        with pytest.raises(ProgrammingError) as exc_info:
            async with CrudDispatcher.open(lambda: session) as crud:
                await crud.delete(CacheGroupResource(crud.tx, cachegroup()))

        assert "requires an identity" in exc_info.value.message
        assert session.untouched
        assert session.commits == 0
        assert session.rollbacks == 1
        assert session.closed

    @pytest.mark.asyncio
    async def test_delete_commits(self, scripted_session, result_factory):
        session = scripted_session(results=[result_factory(rowcount=1)])

        async with CrudDispatcher.open(lambda: session) as crud:
            await crud.delete(CacheGroupResource(crud.tx, CacheGroupSchema(id=5)))

        assert session.commits == 1
        assert str(session.applied[0]).startswith("DELETE FROM cachegroup")

    @pytest.mark.asyncio
    async def test_delete_missing_row_is_not_found(self, scripted_session, result_factory):
        session = scripted_session(results=[result_factory(rowcount=0)])

        with pytest.raises(NotFoundError):
            async with CrudDispatcher.open(lambda: session) as crud:
                await crud.delete(CacheGroupResource(crud.tx, CacheGroupSchema(id=5)))

        assert session.commits == 0
        assert session.applied == []

    @pytest.mark.asyncio
    async def test_delete_hitting_many_rows_rolls_back(self, scripted_session, result_factory):
        session = scripted_session(results=[result_factory(rowcount=2)])

        with pytest.raises(PersistenceError):
            async with CrudDispatcher.open(lambda: session) as crud:
                await crud.delete(CacheGroupResource(crud.tx, CacheGroupSchema(id=5)))

        assert session.commits == 0
        assert session.rollbacks == 1
