"""Pydantic schema for delivery services."""

from pydantic import Field

from src.shared.schemas import ResourceSchema


class DeliveryServiceSchema(ResourceSchema):
    """Delivery service as exchanged with clients.

    ``cdn_name`` and ``type`` are derived and only populated on read.
    """

    xml_id: str | None = Field(default=None, examples=["demo1"])
    display_name: str | None = Field(default=None, examples=["Demo 1"])
    active: bool | None = None
    cdn_id: int | None = None
    cdn_name: str | None = None
    type_id: int | None = None
    type: str | None = Field(default=None, examples=["HTTP"])
    routing_name: str | None = Field(default=None, examples=["video"])
    dscp: int | None = None
    protocol: int | None = None
    geo_limit: int | None = None
    long_desc: str | None = None
