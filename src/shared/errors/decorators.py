"""Decorators for error handling."""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from .base import AppError
from .mapping import ExceptionMapper

P = ParamSpec("P")
T = TypeVar("T")


def safe(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Protect a resource operation against technical errors.

    Usage:
        @safe
        async def create(self) -> CacheGroupSchema:
            # AppError subclasses pass through unchanged,
            # IntegrityError and friends become PersistenceError subclasses
            ...
    """

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except AppError:
            raise
        except Exception as e:
            raise ExceptionMapper.map(e, func.__qualname__) from e

    return wrapper
