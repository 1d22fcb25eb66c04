#!/usr/bin/env python3
"""
One-shot XQuery Autostart runner

Connects to MongoDB, fires the startup triggers once and disconnects.
Useful for running the autostart scripts outside the API host.

Usage:
    autostart-run
    python -m autostart.runner

Environment Variables:
    MONGO_URI: MongoDB connection string
    DATABASE_NAME: Store database name (default: exist_db)
    USE_TRANSACTIONS: Use multi-document transactions (default: true)
    TRIGGER_PARAMETERS: JSON map, e.g. {"xquery": ["/db/init.xq"]}
    QUERY_SERVICE: Query runtime factory as module:attribute
    LOG_LEVEL: Logging level (default: INFO)
"""
import asyncio
import logging
import sys

from autostart.config import get_settings
from autostart.database.connections import close_connections, get_broker, get_database, get_mongo_client
from autostart.database.registry import create_indexes
from autostart.logging_config import configure_logging
from autostart.triggers import XQueryStartupTrigger, run_startup_triggers

logger = logging.getLogger("autostart.runner")


async def main() -> int:
    """Run the startup triggers once. Returns the process exit code."""
    settings = get_settings()
    trigger = XQueryStartupTrigger()

    try:
        db = await get_database()
        client = await get_mongo_client()
        await client.admin.command("ping")
        logger.info("Connected to MongoDB")

        await create_indexes(db)

        broker = await get_broker()
        await run_startup_triggers(broker, [trigger], settings.trigger_parameters)
    except Exception as e:
        logger.error(f"Runner error: {e}")
        return 1
    finally:
        await close_connections()
        logger.info("Disconnected")

    report = trigger.last_report
    if report is not None and report.failed:
        logger.warning(f"{report.failed} autostart script(s) failed")
    return 0


def cli() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("=" * 60)
    logger.info("XQuery Autostart Runner")
    logger.info(f"Database: {settings.database_name}")
    logger.info(f"Transactions: {'on' if settings.use_transactions else 'off'}")
    logger.info("=" * 60)

    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
