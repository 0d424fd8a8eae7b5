"""Generic CRUD router.

``build_router`` mounts the same five endpoints for any ``Resource``::

    GET    /{key}         read, query parameters are filters
    POST   /{key}         create
    GET    /{key}/{id}    read one
    PUT    /{key}/{id}    update
    DELETE /{key}/{id}    delete

Every endpoint opens its own request context through ``CrudDispatcher``;
failures propagate as ``AppError`` and are rendered by the exception handlers.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Request

from src.core.config import settings
from src.core.database import get_session_factory
from src.shared.crud import CrudDispatcher
from src.shared.errors import NotFoundError
from src.shared.resource import Resource
from src.shared.schemas import Alert, AlertsResponse, ResourceResponse
from src.shared.transaction import SessionFactory

SessionFactoryDep = Annotated[SessionFactory, Depends(get_session_factory)]
ResourceId = Annotated[int, Path(description="Resource identity")]


def _dispatcher(factory: SessionFactory):
    return CrudDispatcher.open(factory, error_delimiter=settings.app.error_delimiter)


def build_router(resource_cls: type[Resource[Any]]) -> APIRouter:
    """Create the CRUD router for one resource type."""
    schema = resource_cls.schema
    name = resource_cls.name
    list_response = ResourceResponse[list[schema]]  # type: ignore[valid-type]
    item_response = ResourceResponse[schema]  # type: ignore[valid-type]

    router = APIRouter(prefix=f"/{resource_cls.key}", tags=[resource_cls.key])

    @router.get("", response_model=list_response, summary=f"List {resource_cls.key}")
    async def read_all(request: Request, factory: SessionFactoryDep) -> Any:
        async with _dispatcher(factory) as crud:
            items = await crud.read(resource_cls(crud.tx), dict(request.query_params))
        return list_response(response=items)

    @router.get("/{id}", response_model=item_response, summary=f"Get one {name}")
    async def read_one(id: ResourceId, factory: SessionFactoryDep) -> Any:
        async with _dispatcher(factory) as crud:
            items = await crud.read(resource_cls(crud.tx), {"id": str(id)})
        if not items:
            raise NotFoundError.for_identity(name, {"id": id})
        return item_response(response=items[0])

    @router.post("", response_model=item_response, summary=f"Create a {name}")
    async def create(entity: schema, factory: SessionFactoryDep) -> Any:  # type: ignore[valid-type]
        # Identity is assigned by the store
        entity.id = None
        async with _dispatcher(factory) as crud:
            created = await crud.create(resource_cls(crud.tx, entity))
        return item_response.with_alert(created, f"{name} was created.")

    @router.put("/{id}", response_model=item_response, summary=f"Update a {name}")
    async def update(id: ResourceId, entity: schema, factory: SessionFactoryDep) -> Any:  # type: ignore[valid-type]
        entity.id = id
        async with _dispatcher(factory) as crud:
            updated = await crud.update(resource_cls(crud.tx, entity))
        return item_response.with_alert(updated, f"{name} was updated.")

    @router.delete("/{id}", response_model=AlertsResponse, summary=f"Delete a {name}")
    async def delete(id: ResourceId, factory: SessionFactoryDep) -> AlertsResponse:
        async with _dispatcher(factory) as crud:
            await crud.delete(resource_cls(crud.tx, schema(id=id)))
        return AlertsResponse(alerts=[Alert(text=f"{name} was deleted.")])

    return router
