"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from propdiary import __version__
from propdiary.application.dto.responses import HealthResponse
from propdiary.config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime without touching the database.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Runs a trivial query through the connection pool.
    """
    from propdiary.infrastructure.storage.sqlite import get_pool

    database = "unavailable"
    try:
        pool = await get_pool()
        if await pool.ping():
            database = "ok"
    except Exception as e:
        logger.warning("db_health_check_failed", error=str(e))

    return HealthResponse(
        status="healthy" if database == "ok" else "unhealthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=database,
    )
