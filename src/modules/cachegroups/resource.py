"""Cache group resource.

Names may only contain letters, digits and ``. - _``; coordinates must be
real positions on the globe; the type must be a cache group type and parents
must exist.
"""

from sqlalchemy import Select, select
from sqlalchemy.orm import aliased

from src.modules.types import Type, TypeInCategory
from src.shared.repository import TableResource
from src.shared.resource import FilterColumn, parse_int
from src.shared.validation import Exists, InRange, Matches, Required, Validator

from .models import CacheGroup
from .schemas import CacheGroupSchema

NAME_PATTERN = r"[A-Za-z0-9._\-]+"
INVALID_CHARACTERS = "invalid characters found - Use alphanumeric . or - or _ ."
LATITUDE_RANGE = "Must be a floating point number within the range +-90"
LONGITUDE_RANGE = "Must be a floating point number within the range +-180"
UNKNOWN_CACHEGROUP = "must reference an existing cachegroup"


class CacheGroupResource(TableResource[CacheGroupSchema]):
    key = "cachegroups"
    name = "cachegroup"
    schema = CacheGroupSchema
    model = CacheGroup
    writable_fields = frozenset(
        {
            "name",
            "short_name",
            "latitude",
            "longitude",
            "parent_cachegroup_id",
            "secondary_parent_cachegroup_id",
            "fallback_to_closest",
            "type_id",
        }
    )
    derived_fields = frozenset(
        {"parent_cachegroup_name", "secondary_parent_cachegroup_name", "type"}
    )

    validator = Validator(
        Required("name"),
        Matches("name", NAME_PATTERN, INVALID_CHARACTERS),
        Required("short_name"),
        Matches("short_name", NAME_PATTERN, INVALID_CHARACTERS),
        InRange("latitude", -90.0, 90.0, LATITUDE_RANGE),
        InRange("longitude", -180.0, 180.0, LONGITUDE_RANGE),
        Required("type_id"),
        TypeInCategory("type_id", "cachegroup"),
        Exists("parent_cachegroup_id", CacheGroup.id, UNKNOWN_CACHEGROUP),
        Exists("secondary_parent_cachegroup_id", CacheGroup.id, UNKNOWN_CACHEGROUP),
    )

    filter_columns = {
        "id": FilterColumn(CacheGroup.id, parse_int, "must be an integer"),
        "name": FilterColumn(CacheGroup.name),
        "shortName": FilterColumn(CacheGroup.short_name),
        "type": FilterColumn(Type.name),
        "typeId": FilterColumn(CacheGroup.type_id, parse_int, "must be an integer"),
    }
    default_order = "name"

    def select_query(self) -> Select:
        parent = aliased(CacheGroup, name="cgp")
        secondary = aliased(CacheGroup, name="cgs")
        return (
            select(
                CacheGroup.id,
                CacheGroup.name,
                CacheGroup.short_name,
                CacheGroup.latitude,
                CacheGroup.longitude,
                parent.name.label("parent_cachegroup_name"),
                CacheGroup.parent_cachegroup_id,
                secondary.name.label("secondary_parent_cachegroup_name"),
                CacheGroup.secondary_parent_cachegroup_id,
                CacheGroup.fallback_to_closest,
                Type.name.label("type"),
                CacheGroup.type_id,
                CacheGroup.last_updated,
            )
            .join(Type, CacheGroup.type_id == Type.id)
            .outerjoin(parent, CacheGroup.parent_cachegroup_id == parent.id)
            .outerjoin(secondary, CacheGroup.secondary_parent_cachegroup_id == secondary.id)
        )
