"""Pydantic schema for CDNs."""

from pydantic import Field

from src.shared.schemas import ResourceSchema


class CDNSchema(ResourceSchema):
    """CDN as exchanged with clients."""

    name: str | None = Field(default=None, examples=["cdn1"])
    domain_name: str | None = Field(default=None, examples=["cdn1.example.net"])
    dnssec_enabled: bool | None = Field(default=None)
