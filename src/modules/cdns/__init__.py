"""CDNs module."""

from .models import CDN
from .resource import CDNResource
from .schemas import CDNSchema

__all__ = ["CDN", "CDNResource", "CDNSchema"]
