"""SQLAlchemy model for CDNs."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database import Base
from src.shared.mixins import IntIDMixin, LastUpdatedMixin


class CDN(IntIDMixin, LastUpdatedMixin, Base):
    """A content delivery network: the top-level grouping of delivery services.

    Attributes:
        id: Serial identifier
        name: Unique CDN name
        domain_name: Domain the CDN serves under
        dnssec_enabled: Whether DNSSEC signing is on
        last_updated: Last modification time
    """

    __tablename__ = "cdn"

    name: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)
    domain_name: Mapped[str] = mapped_column(String(1024), nullable=False)
    dnssec_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
