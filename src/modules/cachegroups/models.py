"""
SQLAlchemy model for cache groups.

A cache group is a set of caches at one location. Edge groups point at
mid-tier parents; when the primary parent is down traffic goes to the
secondary parent, or to the closest group if ``fallback_to_closest`` is set.
"""

from sqlalchemy import Boolean, Float, ForeignKey, String, true
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database import Base
from src.shared.mixins import IntIDMixin, LastUpdatedMixin


class CacheGroup(IntIDMixin, LastUpdatedMixin, Base):
    """Cache group model.

    Attributes:
        id: Serial identifier
        name: Unique name
        short_name: Unique short name
        latitude: Location latitude in degrees
        longitude: Location longitude in degrees
        parent_cachegroup_id: Primary parent cache group
        secondary_parent_cachegroup_id: Secondary parent cache group
        fallback_to_closest: Fall back to the closest group when parents fail
        type_id: Type row id (column ``type``)
        last_updated: Last modification time
    """

    __tablename__ = "cachegroup"

    name: Mapped[str] = mapped_column(String(45), nullable=False, unique=True)
    short_name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    parent_cachegroup_id: Mapped[int | None] = mapped_column(
        ForeignKey("cachegroup.id"),
        nullable=True,
        index=True,
    )
    secondary_parent_cachegroup_id: Mapped[int | None] = mapped_column(
        ForeignKey("cachegroup.id"),
        nullable=True,
        index=True,
    )
    fallback_to_closest: Mapped[bool | None] = mapped_column(
        Boolean,
        nullable=True,
        server_default=true(),
    )
    type_id: Mapped[int] = mapped_column(
        "type",
        ForeignKey("type.id"),
        nullable=False,
        index=True,
    )
