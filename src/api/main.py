"""
FastAPI application for the Faktura invoicing service.

Run with ``uvicorn src.api.main:app`` or ``python manage.py start``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from src.api.middleware.error_handler import setup_exception_handlers
from src.api.routes import (
    company_router,
    customers_router,
    dashboard_router,
    health_router,
    invoices_router,
)
from src.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    company_router,
    customers_router,
    invoices_router,
    dashboard_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Migrate the schema and open the pool before serving; close it after."""
    from src.infrastructure.storage.sqlite import close_connection_pool, get_connection_pool
    from src.infrastructure.storage.sqlite.migrations import run_migrations

    settings = get_settings()
    log = logger.bind(db_path=str(settings.storage.db_path))
    log.info("application_starting", environment=settings.environment)

    try:
        applied = await run_migrations()
        pool = await get_connection_pool()
    except Exception as e:
        log.error("startup_failed", error=str(e))
        raise

    log.info(
        "application_started",
        migrations_applied=[f"v{r.version}_{r.name}" for r in applied],
        pool_size=pool.pool_size,
    )

    try:
        yield
    finally:
        await close_connection_pool()
        log.info("application_stopped")


def create_app() -> FastAPI:
    """Build the app: middleware, error handlers and routers."""
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="Faktura API",
        description="Invoicing for small companies: customers, invoices, totals and PDFs",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Last added runs first: errors are caught outside the request logger
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Content-Type", settings.api.tenant_header],
            # the browser needs these to name a downloaded PDF and trace a request
            expose_headers=["Content-Disposition", "X-Request-ID"],
        )

    setup_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def root_health() -> dict[str, str]:
        """Liveness probe for container orchestrators."""
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    api = get_settings().api
    uvicorn.run("src.api.main:app", host=api.host, port=api.port, reload=api.debug)
