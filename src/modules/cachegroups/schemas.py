"""Pydantic schema for cache groups."""

from pydantic import Field

from src.shared.schemas import ResourceSchema


class CacheGroupSchema(ResourceSchema):
    """Cache group as exchanged with clients.

    ``parent_cachegroup_name``, ``secondary_parent_cachegroup_name`` and
    ``type`` are derived from foreign keys and only populated on read.
    """

    name: str | None = Field(default=None, examples=["us-co-denver"])
    short_name: str | None = Field(default=None, examples=["den"])
    latitude: float | None = Field(default=None, examples=[39.7392])
    longitude: float | None = Field(default=None, examples=[-104.9903])
    parent_cachegroup_id: int | None = None
    parent_cachegroup_name: str | None = None
    secondary_parent_cachegroup_id: int | None = None
    secondary_parent_cachegroup_name: str | None = None
    fallback_to_closest: bool | None = None
    type: str | None = Field(default=None, examples=["EDGE_LOC"])
    type_id: int | None = None
