"""Delivery services module."""

from .models import DeliveryService
from .resource import DeliveryServiceResource
from .schemas import DeliveryServiceSchema

__all__ = ["DeliveryService", "DeliveryServiceResource", "DeliveryServiceSchema"]
