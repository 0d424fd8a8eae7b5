"""Cache groups module."""

from .models import CacheGroup
from .resource import CacheGroupResource
from .schemas import CacheGroupSchema

__all__ = ["CacheGroup", "CacheGroupResource", "CacheGroupSchema"]
