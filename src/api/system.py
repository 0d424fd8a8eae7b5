"""Health endpoints."""

from typing import Any

from fastapi import APIRouter

from src.core.config import settings
from src.core.database import db_manager
from src.shared.schemas import HealthResponse

router = APIRouter(prefix="/observability", tags=["System"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for load balancer."""
    postgres = "healthy" if await db_manager.health_check() else "unhealthy"
    return HealthResponse(
        status=postgres,
        version=settings.app.version,
        dependencies={"postgres": postgres},
    )


@router.get("/ready")
async def readiness_check() -> dict[str, Any]:
    """Readiness check endpoint: ready once the connection pool exists."""
    pool = db_manager.get_pool_status()
    return {"ready": pool.get("status") != "not_initialized", "pool": pool}


@router.get("/live")
async def liveness_check() -> dict[str, bool]:
    """Liveness check endpoint."""
    return {"alive": True}
