"""SQLAlchemy model mixins for common columns."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class IntIDMixin:
    """Mixin providing a serial integer primary key.

    Example:
        class CDN(IntIDMixin, Base):
            __tablename__ = "cdn"
            name: Mapped[str] = mapped_column(String(1024))
    """

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )


class LastUpdatedMixin:
    """Mixin providing a ``last_updated`` timestamp.

    Set by the database on insert and refreshed on every update; resources
    return it to callers so clients can tell which version they hold.
    """

    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
