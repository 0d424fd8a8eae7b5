"""Request-scoped transaction handling.

Each request gets exactly one ``RequestContext`` wrapping one ``AsyncSession``.
The context tracks where the request is in its lifecycle and whether it
intends to commit::

    OPEN -> VALIDATING -> PERSISTING -> COMMIT_PENDING  -> CLOSED
                  \\              \\-> ROLLBACK_PENDING -> CLOSED
                   \\-> ROLLBACK_PENDING -> CLOSED

Commit intent starts as rollback. Resources only ever see a ``Transaction``
(a query handle without commit/rollback); closing is done once, by
``request_context`` on the way out, on every exit path.
"""

from __future__ import annotations

import enum
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.errors import ExceptionMapper, ProgrammingError
from src.shared.logging import log_transaction_closed


class TxState(enum.StrEnum):
    OPEN = "open"
    VALIDATING = "validating"
    PERSISTING = "persisting"
    COMMIT_PENDING = "commit_pending"
    ROLLBACK_PENDING = "rollback_pending"
    CLOSED = "closed"


_TRANSITIONS: dict[TxState, frozenset[TxState]] = {
    TxState.OPEN: frozenset(
        {TxState.VALIDATING, TxState.PERSISTING, TxState.ROLLBACK_PENDING, TxState.CLOSED}
    ),
    TxState.VALIDATING: frozenset({TxState.PERSISTING, TxState.ROLLBACK_PENDING}),
    TxState.PERSISTING: frozenset({TxState.COMMIT_PENDING, TxState.ROLLBACK_PENDING}),
    TxState.COMMIT_PENDING: frozenset({TxState.ROLLBACK_PENDING, TxState.CLOSED}),
    TxState.ROLLBACK_PENDING: frozenset({TxState.ROLLBACK_PENDING, TxState.CLOSED}),
    TxState.CLOSED: frozenset(),
}


class Transaction:
    """Query handle given to resources and validation rules.

    Exposes reads and writes on the request's session but deliberately no
    ``commit``/``rollback``: that decision belongs to the request context.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def execute(self, statement: Any, params: Any = None) -> Any:
        if params is None:
            return await self._session.execute(statement)
        return await self._session.execute(statement, params)

    async def scalar(self, statement: Any, params: Any = None) -> Any:
        if params is None:
            return await self._session.scalar(statement)
        return await self._session.scalar(statement, params)


class RequestContext:
    """One transaction and one commit decision for the lifetime of a request."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.tx = Transaction(session)
        self.state = TxState.OPEN

    @property
    def commit_intent(self) -> bool:
        return self.state is TxState.COMMIT_PENDING

    @property
    def closed(self) -> bool:
        return self.state is TxState.CLOSED

    def transition(self, target: TxState) -> None:
        """Move to ``target``; illegal moves are programming errors."""
        if target not in _TRANSITIONS[self.state]:
            raise ProgrammingError(
                message=f"Illegal request state transition {self.state} -> {target}",
            )
        self.state = target

    def begin_validation(self) -> None:
        self.transition(TxState.VALIDATING)

    def begin_persistence(self) -> None:
        self.transition(TxState.PERSISTING)

    def request_commit(self) -> None:
        self.transition(TxState.COMMIT_PENDING)

    def request_rollback(self) -> None:
        """Flip intent to rollback; valid from any state before CLOSED."""
        if self.state is TxState.CLOSED:
            raise ProgrammingError(message="Request context is already closed")
        self.state = TxState.ROLLBACK_PENDING

    async def close(self) -> None:
        """Commit or roll back, then mark the context CLOSED.

        A failing commit is rolled back and surfaced as a persistence error.
        """
        if self.state is TxState.CLOSED:
            raise ProgrammingError(message="Request context is already closed")

        previous = self.state
        if self.commit_intent:
            try:
                await self._session.commit()
            except SQLAlchemyError as e:
                self.state = TxState.CLOSED
                await self._session.rollback()
                log_transaction_closed("rollback", state=previous)
                raise ExceptionMapper.map(e, "commit") from e
            outcome = "commit"
        else:
            await self._session.rollback()
            outcome = "rollback"

        self.state = TxState.CLOSED
        log_transaction_closed(outcome, state=previous)


SessionFactory = Callable[[], AsyncSession]


@asynccontextmanager
async def request_context(session_factory: SessionFactory) -> AsyncIterator[RequestContext]:
    """Open a session, yield its request context and always close it.

    Any exception escaping the block forces a rollback before it propagates.
    """
    session = session_factory()
    ctx = RequestContext(session)
    try:
        try:
            yield ctx
        except BaseException:
            if not ctx.closed:
                ctx.request_rollback()
                await ctx.close()
            raise
        if not ctx.closed:
            await ctx.close()
    finally:
        await session.close()
