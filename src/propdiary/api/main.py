"""
FastAPI application factory.

Creates and configures the main application instance.
"""

import asyncio
import contextlib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from propdiary import __version__
from propdiary.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from propdiary.api.middleware.error_handler import setup_exception_handlers
from propdiary.api.routes import (
    dashboard_router,
    diary_router,
    health_router,
    properties_router,
    recycle_bin_router,
    tenancies_router,
    units_router,
)
from propdiary.config import configure_logging, get_logger, get_settings
from propdiary.core.exceptions import DatabaseError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the schema, opens the pool, sweeps the recycle bin and starts
    the periodic sweep; tears all of it down on shutdown.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
    )

    try:
        from propdiary.infrastructure.storage.sqlite import get_pool
        from propdiary.infrastructure.storage.sqlite.migrations import initialize_database

        results = await initialize_database()
        failed = [r for r in results if not r.success]
        if failed:
            raise DatabaseError(f"migration v{failed[0].version}", failed[0].error or "failed")
        logger.info("database_initialized", applied=len(results))

        await get_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    from propdiary.application.use_cases import SweepRecycleBinUseCase, run_periodic_sweep

    sweep = SweepRecycleBinUseCase()
    if settings.retention.sweep_on_startup:
        try:
            await sweep.execute()
        except Exception as e:
            # Listing sweeps again; startup must not hinge on it
            logger.warning("startup_sweep_failed", error=str(e))

    sweep_task: asyncio.Task | None = None
    if settings.retention.periodic_sweep_enabled:
        sweep_task = asyncio.create_task(
            run_periodic_sweep(settings.retention.sweep_interval_seconds, sweep),
            name="recycle-bin-sweep",
        )

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    if sweep_task is not None:
        sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweep_task

    try:
        from propdiary.infrastructure.storage.sqlite import close_pool

        await close_pool()

    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="Property Diary API",
        description="Tenancy reminders, diary annotations and recycle bin retention",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(properties_router)
    app.include_router(units_router)
    app.include_router(tenancies_router)
    app.include_router(diary_router)
    app.include_router(recycle_bin_router)
    app.include_router(dashboard_router)

    return app


# Create app instance
app = create_app()


@app.get("/")
async def root() -> dict[str, str]:
    """Return API info."""
    return {
        "name": get_settings().app_name,
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "propdiary.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
