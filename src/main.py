"""FastAPI application entry point"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api import system as system_router
from src.api.crud import build_router
from src.api.registry import RESOURCES
from src.core.config import settings
from src.core.database import db_manager
from src.core.middleware import RequestTracingMiddleware

# Import all models first to ensure proper mapper configuration
from src.modules.cachegroups.models import CacheGroup  # noqa: F401
from src.modules.cdns.models import CDN  # noqa: F401
from src.modules.deliveryservices.models import DeliveryService  # noqa: F401
from src.modules.types.models import Type  # noqa: F401
from src.shared.errors import setup_exception_handlers
from src.shared.logging import get_logger, setup_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    setup_logger()
    logger.info(f"Starting {settings.app.name}...")

    db_manager.init()
    logger.info("Database connection pool initialized")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await db_manager.close()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        debug=settings.app.debug,
        lifespan=lifespan,
        docs_url=f"{settings.app.api_prefix}/docs" if settings.app.debug else None,
        openapi_url=f"{settings.app.api_prefix}/openapi.json" if settings.app.debug else None,
        redirect_slashes=False,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTracingMiddleware)

    setup_exception_handlers(app)

    for resource_cls in RESOURCES.values():
        app.include_router(build_router(resource_cls), prefix=settings.app.api_prefix)

    # System router (no API prefix - accessible at root)
    app.include_router(system_router.router)

    return app


# Create the application instance
app = create_app()
