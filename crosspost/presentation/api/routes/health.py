import structlog
from fastapi import APIRouter

from ....infrastructure.logging import Timer
from ..dependencies import get_database, uses_database

router = APIRouter(tags=["health"])
logger = structlog.get_logger()


@router.get("/health", summary="Health check")
async def health() -> dict:
    """Liveness check."""
    return {"status": "healthy"}


@router.get("/health/ready", summary="Readiness check")
async def readiness() -> dict:
    """Readiness check: the credential store must be reachable."""
    if not uses_database():
        return {"status": "ready", "checks": {"credential_store": {"status": "healthy", "backend": "memory"}}}

    try:
        with Timer() as t:
            await get_database().ping()
        check = {"status": "healthy", "backend": "database", "latency_ms": t.duration_ms}
    except Exception as e:
        logger.error("Credential database unreachable", error=str(e))
        check = {"status": "unhealthy", "backend": "database", "error": str(e)}

    return {
        "status": "ready" if check["status"] == "healthy" else "degraded",
        "checks": {"credential_store": check},
    }
