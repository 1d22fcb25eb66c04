"""
Execution of a single startup script.
"""
import logging
from datetime import datetime, timezone

from autostart.database.broker import DBBroker
from autostart.models.report import ScriptOrigin, ScriptResult, ScriptStatus
from autostart.query import AccessContext
from autostart.sources import get_source

logger = logging.getLogger(__name__)


def module_load_path(locator: str) -> str:
    """Everything before the last '/', so scripts can import sibling modules."""
    if "/" not in locator:
        return locator
    return locator.rsplit("/", 1)[0]


async def execute_query(
    broker: DBBroker,
    path: str,
    origin: ScriptOrigin = ScriptOrigin.COLLECTION,
) -> ScriptResult:
    """
    Resolve, compile and run the script at `path` (an embedded locator).

    Never raises: every failure is logged and reported in the returned
    ScriptResult. The query context, once created, is always cleaned up.
    """
    started_at = datetime.now(timezone.utc)
    context = None
    try:
        source = await get_source(broker, path)

        if source is None:
            logger.info(f"No XQuery found at '{path}'")
            status, output, error = ScriptStatus.NOT_FOUND, None, None

        else:
            service = broker.get_query_service()
            context = service.new_context(AccessContext.TRIGGER)

            # Allow use of modules with relative paths
            context.set_module_load_path(module_load_path(path))

            compiled = await service.compile(context, source)

            logger.info(f"Starting XQuery at '{path}'")

            context.prepare_for_execution()
            result = await service.execute(compiled, None)

            output = str(result.get_string_value())
            logger.info(f"Result XQuery: '{output}'")
            status, error = ScriptStatus.SUCCESS, None

    except Exception as e:
        logger.error(
            f"An error occurred during preparation/execution of the XQuery script {path}: {e}",
            exc_info=True,
        )
        status, output, error = ScriptStatus.FAILED, None, str(e) or type(e).__name__

    finally:
        if context is not None:
            try:
                context.run_cleanup_tasks()
            except Exception as e:
                logger.error(f"Cleanup of XQuery context for {path} failed: {e}", exc_info=True)

    return ScriptResult(
        locator=path,
        origin=origin,
        status=status,
        result=output,
        error=error,
        started_at=started_at,
        finished_at=datetime.now(timezone.utc),
    )
