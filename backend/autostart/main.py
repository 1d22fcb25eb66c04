"""
XQuery Autostart - FastAPI host

Opens the document store, fires the startup triggers once and exposes
health and autostart status endpoints.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from autostart.config import get_settings
from autostart.database.connections import close_connections, get_broker, get_database
from autostart.database.registry import create_indexes, sync_registry
from autostart.logging_config import configure_logging
from autostart.routers import health
from autostart.triggers import XQueryStartupTrigger, run_startup_triggers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Sync store metadata and create indexes
    - Fire the startup triggers once

    Shutdown:
    - Close all database connections
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting up XQuery Autostart...")

    trigger = XQueryStartupTrigger()
    app.state.autostart_trigger = trigger

    try:
        db = await get_database()
        await sync_registry(db)
        await create_indexes(db)
        logger.info("Store metadata synced and indexes created")

        broker = await get_broker()
        await run_startup_triggers(broker, [trigger], settings.trigger_parameters)
    except Exception as e:
        logger.warning(f"Database initialization warning: {e}")

    yield

    logger.info("Shutting down XQuery Autostart...")
    await close_connections()
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title="XQuery Autostart",
    description="Runs stored and configured XQuery scripts once when the database starts.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with service information."""
    return {
        "name": "XQuery Autostart",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
