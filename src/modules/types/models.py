"""
SQLAlchemy model for entity types.

A type row classifies other entities (EDGE_LOC and MID_LOC for cache groups,
HTTP and DNS for delivery services). ``use_in_table`` names the table the
type is meant for.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database import Base
from src.shared.mixins import IntIDMixin, LastUpdatedMixin


class Type(IntIDMixin, LastUpdatedMixin, Base):
    """Type lookup table shared by all resources."""

    __tablename__ = "type"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    use_in_table: Mapped[str | None] = mapped_column(String(255), nullable=True)
