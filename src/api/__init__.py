"""API routers package."""

from src.api import crud, registry, system

__all__ = ["crud", "registry", "system"]
