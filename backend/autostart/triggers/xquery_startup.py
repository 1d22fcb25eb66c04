"""
Startup trigger that fires XQuery scripts during database startup.

Scripts are either stored in /db/system/autostart or listed in the trigger
parameters:

    TRIGGER_PARAMETERS='{"xquery": ["/db/script1.xq", "/db/script2.xq"]}'

Stored scripts run first, then parameter scripts. A path reachable from
both sources runs twice.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from autostart.database.broker import DBBroker
from autostart.models.report import ScriptOrigin, ScriptResult, ScriptStatus, TriggerReport
from autostart.services.discovery import get_scripts_in_startup_collection
from autostart.services.executor import execute_query
from autostart.services.parameters import get_parameters
from autostart.triggers.base import StartupTrigger

logger = logging.getLogger(__name__)


class XQueryStartupTrigger(StartupTrigger):
    """Runs autostart XQuery scripts once per database start."""

    def __init__(self):
        self.last_report: Optional[TriggerReport] = None

    async def execute(self, broker: DBBroker, params: Mapping[str, Sequence[Any]]) -> None:
        logger.info("Starting Startup Trigger for stored XQueries")

        report = TriggerReport(trigger=type(self).__name__)

        # Both sources are discovered before anything runs
        stored = await self._stored_scripts(broker)
        declared = self._declared_scripts(params)
        logger.info(f"Found {len(stored)} stored and {len(declared)} configured XQuery scripts")

        queue = [(path, ScriptOrigin.COLLECTION) for path in stored]
        queue += [(path, ScriptOrigin.PARAMETER) for path in declared]

        for path, origin in queue:
            report.results.append(await self._run_script(broker, path, origin))

        report.finished_at = datetime.now(timezone.utc)
        self.last_report = report

        logger.info(
            f"Startup Trigger finished: {report.succeeded} succeeded, "
            f"{report.failed} failed, {report.not_found} not found"
        )

    @staticmethod
    async def _run_script(broker: DBBroker, path: str, origin: ScriptOrigin) -> ScriptResult:
        try:
            return await execute_query(broker, path, origin)
        except Exception as e:
            logger.error(f"Running the XQuery script {path} failed: {e}", exc_info=True)
            return ScriptResult(
                locator=path,
                origin=origin,
                status=ScriptStatus.FAILED,
                error=str(e) or type(e).__name__,
            )

    @staticmethod
    async def _stored_scripts(broker: DBBroker) -> list[str]:
        try:
            return await get_scripts_in_startup_collection(broker)
        except Exception as e:
            logger.error(f"Scanning the autostart collection failed: {e}", exc_info=True)
            return []

    @staticmethod
    def _declared_scripts(params: Mapping[str, Sequence[Any]]) -> list[str]:
        try:
            return get_parameters(params)
        except Exception as e:
            logger.error(f"Reading the 'xquery' parameters failed: {e}", exc_info=True)
            return []
