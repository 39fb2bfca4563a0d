"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from src.application.dto.responses import DatabaseHealthResponse, HealthResponse
from src.config import get_settings

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and reports migration state.
    """
    from src.infrastructure.storage.sqlite import get_connection_pool
    from src.infrastructure.storage.sqlite.migrations import get_migration_status

    settings = get_settings()
    db_status = DatabaseHealthResponse(
        status="unavailable",
        db_path=str(settings.storage.db_path),
    )

    try:
        pool = await get_connection_pool()
        await pool.ping()

        migrations = await get_migration_status(settings.storage.db_path)
        db_status = DatabaseHealthResponse(
            status="ok" if not migrations["pending_migrations"] else "pending_migrations",
            db_path=str(settings.storage.db_path),
            applied_migrations=migrations["applied_migrations"],
            pending_migrations=migrations["pending_migrations"],
        )

    except Exception as e:
        db_status.error = str(e)

    return HealthResponse(
        status="healthy" if db_status.status == "ok" else "unhealthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
