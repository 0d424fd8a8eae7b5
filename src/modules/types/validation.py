"""Validation rules backed by the type table."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from sqlalchemy import select

from src.shared.validation import Rule

from .models import Type

if TYPE_CHECKING:
    from src.shared.transaction import Transaction


class TypeInCategory(Rule):
    """The referenced type exists and is meant for ``category``.

    ``category`` is compared with ``type.use_in_table``, so a cache group
    cannot point at a delivery service type and vice versa.
    """

    def __init__(self, field: str, category: str, message: str | None = None) -> None:
        super().__init__(field, message or f"must be a valid {category} type")
        self.category = category

    async def passes(self, value: Any, entity: BaseModel, tx: Transaction | None) -> bool:
        if tx is None:
            raise RuntimeError(f"{self!r} needs a transaction to query")
        stmt = select(Type.name, Type.use_in_table).where(Type.id == value)
        row = (await tx.execute(stmt)).mappings().first()
        return row is not None and row["use_in_table"] == self.category
