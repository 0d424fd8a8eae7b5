"""Entity type lookups."""

from .models import Type
from .validation import TypeInCategory

__all__ = ["Type", "TypeInCategory"]
