"""
Directory Service Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures global exception handling, loads the dataset at startup and
optionally keeps it fresh with a periodic background reload.

Design Goals
------------
- Deterministic startup
- A failed initial load never prevents the service from starting
- Centralized router registration
- Global exception safety net
- Test-friendly via create_app()
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .api import catalog_routes, health_routes, site_routes
from .catalog.facets import UnknownFacetError
from .catalog.loader import DatasetLoader, LoadError
from .catalog.models import Dataset
from .config import settings
from .core.errors import load_error_handler, unhandled_exception_handler, unknown_facet_handler
from .state import app_state

logger = logging.getLogger("libtech.app")


# ---------------------------------------------------------------------
# Background Refresh
# ---------------------------------------------------------------------

async def refresh_worker(loader: DatasetLoader, interval: float) -> None:
    """
    Reload the dataset every `interval` seconds, bypassing caches.

    Failures are logged and retried at the next tick only.
    """
    logger.info("Dataset refresh worker started (every %.0fs)", interval)
    while True:
        try:
            await asyncio.sleep(interval)
            await loader.load(bust_cache=True)
        except asyncio.CancelledError:
            logger.info("Dataset refresh worker cancelled.")
            break
        except LoadError:
            # Already logged and recorded on the state by the loader
            continue


def _log_dataset_change(dataset: Dataset, generation: int) -> None:
    logger.info("Serving dataset generation %d (%d records)", generation, len(dataset))


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting libtech-directory")
    unsubscribe = app_state.subscribe(_log_dataset_change)
    loader = DatasetLoader(app_state)

    if settings.load_on_startup:
        try:
            await loader.load()
        except LoadError:
            logger.warning("Starting without data; the initial dataset load failed")

    worker: Optional[asyncio.Task] = None
    if settings.refresh_interval_seconds > 0:
        worker = asyncio.create_task(refresh_worker(loader, settings.refresh_interval_seconds))

    try:
        yield
    finally:
        if worker is not None:
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker
        unsubscribe()
        logger.info("Shutting down libtech-directory")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    app = FastAPI(
        title="libtech-directory",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # --------------------------------------------------------------
    # Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(LoadError, load_error_handler)
    app.add_exception_handler(UnknownFacetError, unknown_facet_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration (site last: it owns the catch-all route)
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(catalog_routes.router)
    app.include_router(site_routes.router)

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
