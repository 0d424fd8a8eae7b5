"""Generic CRUD dispatcher.

One pipeline for every resource type::

    async with CrudDispatcher.open(session_factory) as dispatcher:
        resource = CacheGroupResource(dispatcher.tx, entity)
        created = await dispatcher.create(resource)

The dispatcher validates, persists, records the commit decision on the
request context and re-raises failures as ``AppError`` subclasses. The
surrounding ``open`` scope closes the transaction exactly once.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from src.shared.errors import AppError, ExceptionMapper, ProgrammingError, ValidationError
from src.shared.logging import log_crud_completed, log_crud_failed, log_crud_started
from src.shared.resource import Resource
from src.shared.transaction import RequestContext, SessionFactory, Transaction, request_context

T = TypeVar("T")


class CrudDispatcher:
    """Runs validate -> persist -> commit/rollback for any ``Resource``."""

    def __init__(self, ctx: RequestContext, *, error_delimiter: str = ", ") -> None:
        self.ctx = ctx
        self.error_delimiter = error_delimiter

    @classmethod
    @asynccontextmanager
    async def open(
        cls,
        session_factory: SessionFactory,
        *,
        error_delimiter: str = ", ",
    ) -> AsyncIterator[CrudDispatcher]:
        """Open a request context and yield a dispatcher bound to it."""
        async with request_context(session_factory) as ctx:
            yield cls(ctx, error_delimiter=error_delimiter)

    @property
    def tx(self) -> Transaction:
        return self.ctx.tx

    async def read(self, resource: Resource[Any], filters: Mapping[str, str]) -> list[Any]:
        """Return matching entities; no match is an empty list, not an error."""
        log_crud_started(resource.key, "read")
        self.ctx.begin_persistence()
        items = await self._run(resource, "read", lambda: resource.read(filters))
        log_crud_completed(resource.key, "read", count=len(items))
        return items

    async def create(self, resource: Resource[Any]) -> Any:
        log_crud_started(resource.key, "create")
        await self._validate(resource, "create")
        return await self._persist(resource, "create", resource.create)

    async def update(self, resource: Resource[Any]) -> Any:
        self._require_identity(resource, "update")
        log_crud_started(resource.key, "update", identity=resource.identify())
        await self._validate(resource, "update")
        return await self._persist(resource, "update", resource.update)

    async def delete(self, resource: Resource[Any]) -> None:
        self._require_identity(resource, "delete")
        log_crud_started(resource.key, "delete", identity=resource.identify())
        await self._persist(resource, "delete", resource.delete)

    # ---- steps ----

    def _require_identity(self, resource: Resource[Any], operation: str) -> None:
        if not resource.has_identity:
            self.ctx.request_rollback()
            error = ProgrammingError(
                message=f"{resource.name} {operation} requires an identity",
                details={"resource_type": resource.key},
            )
            log_crud_failed(resource.key, operation, error.message, error_code=error.code)
            raise error

    async def _validate(self, resource: Resource[Any], operation: str) -> None:
        self.ctx.begin_validation()
        errors = await self._run(resource, operation, resource.validate)
        if errors:
            self.ctx.request_rollback()
            error = ValidationError(errors, delimiter=self.error_delimiter)
            log_crud_failed(resource.key, operation, error.message, error_code=error.code)
            raise error

    async def _persist(
        self,
        resource: Resource[Any],
        operation: str,
        call: Callable[[], Awaitable[T]],
    ) -> T:
        self.ctx.begin_persistence()
        result = await self._run(resource, operation, call)
        self.ctx.request_commit()
        log_crud_completed(resource.key, operation, identity=resource.identify())
        return result

    async def _run(
        self,
        resource: Resource[Any],
        operation: str,
        call: Callable[[], Awaitable[T]],
    ) -> T:
        """Invoke a resource step, turning any failure into a rollback."""
        try:
            return await call()
        except ValidationError as e:
            self.ctx.request_rollback()
            error = ValidationError(e.field_errors, delimiter=self.error_delimiter)
            log_crud_failed(resource.key, operation, error.message, error_code=error.code)
            raise error from e
        except AppError as e:
            self.ctx.request_rollback()
            log_crud_failed(resource.key, operation, e.message, error_code=e.code)
            raise
        except Exception as e:
            self.ctx.request_rollback()
            mapped = ExceptionMapper.map(e, f"{resource.key}.{operation}")
            log_crud_failed(resource.key, operation, mapped.message, error_code=mapped.code)
            raise mapped from e
