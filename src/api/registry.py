"""Resource registry: maps a route key to its ``Resource`` implementation."""

from typing import Any

from src.modules.cachegroups import CacheGroupResource
from src.modules.cdns import CDNResource
from src.modules.deliveryservices import DeliveryServiceResource
from src.shared.resource import Resource

RESOURCES: dict[str, type[Resource[Any]]] = {
    cls.key: cls
    for cls in (
        CacheGroupResource,
        DeliveryServiceResource,
        CDNResource,
    )
}


def get_resource(key: str) -> type[Resource[Any]]:
    """Look up a resource class by its route key.

    Raises:
        KeyError: No resource is registered under ``key``.
    """
    return RESOURCES[key]
