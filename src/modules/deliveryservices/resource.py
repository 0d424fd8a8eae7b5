"""Delivery service resource."""

from sqlalchemy import Select, select

from src.modules.cdns import CDN
from src.modules.types import Type, TypeInCategory
from src.shared.repository import TableResource
from src.shared.resource import FilterColumn, parse_bool, parse_int
from src.shared.validation import (
    Exists,
    InRange,
    Length,
    Matches,
    OneOf,
    Required,
    Validator,
)

from .models import DeliveryService
from .schemas import DeliveryServiceSchema

NO_SPACES = r"\S+"
ROUTING_NAME_PATTERN = r"[A-Za-z0-9]([A-Za-z0-9\-]*[A-Za-z0-9])?"

# 0 http, 1 https, 2 http and https, 3 http redirected to https
PROTOCOLS = frozenset({0, 1, 2, 3})
# 0 none, 1 coverage zone only, 2 coverage zone and country codes
GEO_LIMITS = frozenset({0, 1, 2})


class DeliveryServiceResource(TableResource[DeliveryServiceSchema]):
    key = "deliveryservices"
    name = "deliveryservice"
    schema = DeliveryServiceSchema
    model = DeliveryService
    writable_fields = frozenset(
        {
            "xml_id",
            "display_name",
            "active",
            "cdn_id",
            "type_id",
            "routing_name",
            "dscp",
            "protocol",
            "geo_limit",
            "long_desc",
        }
    )
    derived_fields = frozenset({"cdn_name", "type"})

    validator = Validator(
        Required("xml_id"),
        Matches("xml_id", NO_SPACES, "cannot contain spaces"),
        Length("xml_id", 1, 48),
        Required("display_name"),
        Length("display_name", 1, 48),
        Required("active"),
        Required("cdn_id"),
        Exists("cdn_id", CDN.id, "must reference an existing cdn"),
        Required("type_id"),
        TypeInCategory("type_id", "deliveryservice"),
        Required("dscp"),
        InRange("dscp", 0, 63, "must be between 0 and 63"),
        Matches("routing_name", ROUTING_NAME_PATTERN, "must be a valid hostname label"),
        Length("routing_name", 1, 48),
        OneOf("protocol", PROTOCOLS),
        OneOf("geo_limit", GEO_LIMITS),
    )

    filter_columns = {
        "id": FilterColumn(DeliveryService.id, parse_int, "must be an integer"),
        "xmlId": FilterColumn(DeliveryService.xml_id),
        "cdnId": FilterColumn(DeliveryService.cdn_id, parse_int, "must be an integer"),
        "typeId": FilterColumn(DeliveryService.type_id, parse_int, "must be an integer"),
        "active": FilterColumn(DeliveryService.active, parse_bool, "must be a boolean"),
    }
    default_order = "xmlId"

    def select_query(self) -> Select:
        return (
            select(
                DeliveryService.id,
                DeliveryService.xml_id,
                DeliveryService.display_name,
                DeliveryService.active,
                DeliveryService.cdn_id,
                CDN.name.label("cdn_name"),
                DeliveryService.type_id,
                Type.name.label("type"),
                DeliveryService.routing_name,
                DeliveryService.dscp,
                DeliveryService.protocol,
                DeliveryService.geo_limit,
                DeliveryService.long_desc,
                DeliveryService.last_updated,
            )
            .join(CDN, DeliveryService.cdn_id == CDN.id)
            .join(Type, DeliveryService.type_id == Type.id)
        )
