"""SQLAlchemy model for delivery services."""

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database import Base
from src.shared.mixins import IntIDMixin, LastUpdatedMixin


class DeliveryService(IntIDMixin, LastUpdatedMixin, Base):
    """A delivery service: one origin served through one CDN.

    Attributes:
        id: Serial identifier
        xml_id: Unique key used in configuration files
        display_name: Human readable name
        active: Whether the service is routed
        cdn_id: Owning CDN (column ``cdn_id``)
        type_id: Type row id (column ``type``)
        routing_name: First DNS label of the service hostname
        dscp: DSCP value set on packets to clients
        protocol: 0 http, 1 https, 2 both, 3 redirect http to https
        geo_limit: 0 none, 1 coverage zone only, 2 country code
        long_desc: Free-form description
        last_updated: Last modification time
    """

    __tablename__ = "deliveryservice"

    xml_id: Mapped[str] = mapped_column(String(48), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(48), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cdn_id: Mapped[int] = mapped_column(ForeignKey("cdn.id"), nullable=False, index=True)
    type_id: Mapped[int] = mapped_column(
        "type",
        ForeignKey("type.id"),
        nullable=False,
        index=True,
    )
    routing_name: Mapped[str] = mapped_column(String(48), nullable=False, default="cdn")
    dscp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    protocol: Mapped[int | None] = mapped_column(Integer, nullable=True, default=0)
    geo_limit: Mapped[int | None] = mapped_column(Integer, nullable=True, default=0)
    long_desc: Mapped[str | None] = mapped_column(Text, nullable=True)
