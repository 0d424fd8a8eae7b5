"""Unit tests for the error taxonomy and store error mapping."""

import pytest
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, ProgrammingError as SAProgrammingError

from src.shared.context import bind_request, clear_request
from src.shared.errors import (
    AppError,
    BadReferenceError,
    ConflictError,
    ExceptionMapper,
    NotFoundError,
    PersistenceError,
    ProgrammingError,
    ServiceUnavailableError,
    ValidationError,
    safe,
)


def integrity(message: str) -> IntegrityError:
    return IntegrityError("INSERT", {}, Exception(message))


class TestTaxonomy:
    """Codes and status hints derived from the classes."""

    @pytest.mark.parametrize(
        ("error_cls", "code", "status_code"),
        [
            (ValidationError, "VALIDATION", 400),
            (NotFoundError, "NOT_FOUND", 404),
            (PersistenceError, "PERSISTENCE", 500),
            (ConflictError, "CONFLICT", 409),
            (BadReferenceError, "BAD_REFERENCE", 400),
            (ServiceUnavailableError, "SERVICE_UNAVAILABLE", 503),
            (ProgrammingError, "PROGRAMMING", 500),
        ],
    )
    def test_code_and_status(self, error_cls, code, status_code):
        assert issubclass(error_cls, AppError)
        assert error_cls.code == code
        assert error_cls.status_code == status_code

    def test_default_message_from_docstring(self):
        assert NotFoundError().message == "Resource not found."

    def test_response_carries_trace_id(self):
        bind_request(request_id="req-1")
        try:
            response = NotFoundError.for_identity("cdn", {"id": 1}).to_response()
        finally:
            clear_request()

        assert response.error == "NOT_FOUND"
        assert response.trace_id == "req-1"
        assert response.details == {"resource_type": "cdn", "identity": {"id": 1}}


class TestExceptionMapper:
    """Store exceptions become persistence errors."""

    def test_unique_violation(self):
        error = ExceptionMapper.map(integrity("duplicate key value violates unique constraint"))

        assert isinstance(error, ConflictError)

    def test_foreign_key_violation(self):
        error = ExceptionMapper.map(integrity("violates foreign key constraint"))

        assert isinstance(error, BadReferenceError)
        assert error.status_code == 400

    def test_other_integrity_violation(self):
        error = ExceptionMapper.map(integrity("violates check constraint"))

        assert type(error) is PersistenceError

    @pytest.mark.parametrize("exc_cls", [OperationalError, InterfaceError])
    def test_connectivity(self, exc_cls):
        error = ExceptionMapper.map(exc_cls("SELECT 1", {}, Exception("connection refused")))

        assert isinstance(error, ServiceUnavailableError)

    def test_database_error_subclass_falls_back_by_mro(self):
        error = ExceptionMapper.map(SAProgrammingError("SELECT", {}, Exception("syntax")))

        assert type(error) is PersistenceError

    def test_app_errors_pass_through(self):
        original = NotFoundError()

        assert ExceptionMapper.map(original) is original

    def test_unknown_exception(self):
        error = ExceptionMapper.map(ZeroDivisionError(), "cdns.create")

        assert isinstance(error, PersistenceError)
        assert error.details == {"function": "cdns.create"}


class TestSafe:
    """The @safe decorator on resource operations."""

    @pytest.mark.asyncio
    async def test_maps_store_errors(self):
        @safe
        async def insert():
            raise integrity("duplicate key")

        with pytest.raises(ConflictError) as exc_info:
            await insert()

        assert isinstance(exc_info.value.__cause__, IntegrityError)

    @pytest.mark.asyncio
    async def test_app_errors_unchanged(self):
        @safe
        async def update():
            raise NotFoundError.for_identity("cdn", {"id": 3})

        with pytest.raises(NotFoundError):
            await update()

    @pytest.mark.asyncio
    async def test_returns_value(self):
        @safe
        async def read():
            return [1, 2]

        assert await read() == [1, 2]
