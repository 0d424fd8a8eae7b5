"""Pytest configuration for unit tests.

This module provides fixtures for unit testing with mocked dependencies.
It imports all SQLAlchemy models to ensure mapper initialization happens correctly.
"""

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

# Import all models to ensure SQLAlchemy mapper is properly configured
from src.modules.cachegroups.models import CacheGroup  # noqa: F401
from src.modules.cdns.models import CDN  # noqa: F401
from src.modules.deliveryservices.models import DeliveryService  # noqa: F401
from src.modules.types.models import Type  # noqa: F401

LAST_UPDATED = datetime(2018, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_result(rows: list[dict[str, Any]] | None = None, rowcount: int | None = None) -> MagicMock:
    """Build a fake SQLAlchemy ``Result`` returning ``rows`` as mappings."""
    rows = rows or []
    result = MagicMock()
    mappings = result.mappings.return_value
    mappings.all.return_value = rows
    mappings.first.return_value = rows[0] if rows else None
    if rows:
        mappings.one.return_value = rows[0]
    else:
        mappings.one.side_effect = RuntimeError("No row was found when one was required")
    result.rowcount = len(rows) if rowcount is None else rowcount
    return result


class ScriptedSession:
    """In-memory stand-in for ``AsyncSession`` with scripted query outcomes.

    ``execute`` and ``scalar`` pop the next scripted outcome; an exception
    instance is raised instead of returned. Writes are only "applied" on
    commit, so tests can assert what a request left behind.
    """

    def __init__(
        self,
        results: list[Any] | None = None,
        scalars: list[Any] | None = None,
        commit_error: Exception | None = None,
    ) -> None:
        self.results = list(results or [])
        self.scalars = list(scalars or [])
        self.commit_error = commit_error
        self.statements: list[Any] = []
        self.pending: list[Any] = []
        self.applied: list[Any] = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    @staticmethod
    def _next(queue: list[Any]) -> Any:
        outcome = queue.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def execute(self, statement: Any, params: Any = None) -> Any:
        self.statements.append(statement)
        if not str(statement).lstrip().upper().startswith("SELECT"):
            self.pending.append(statement)
        return self._next(self.results)

    async def scalar(self, statement: Any, params: Any = None) -> Any:
        self.statements.append(statement)
        return self._next(self.scalars)

    async def commit(self) -> None:
        if self.commit_error is not None:
            raise self.commit_error
        self.commits += 1
        self.applied.extend(self.pending)
        self.pending.clear()

    async def rollback(self) -> None:
        self.rollbacks += 1
        self.pending.clear()

    async def close(self) -> None:
        self.closed = True

    @property
    def untouched(self) -> bool:
        return not self.statements and not self.applied


@pytest.fixture
def result_factory():
    """Factory for fake query results."""
    return make_result


@pytest.fixture
def scripted_session():
    """Factory for ``ScriptedSession`` instances."""
    return ScriptedSession


@pytest.fixture
def last_updated():
    return LAST_UPDATED


@pytest.fixture
def mock_session():
    """Create a mock AsyncSession for testing.

    This session mocks all common SQLAlchemy AsyncSession methods.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.scalar = AsyncMock()
    return session
