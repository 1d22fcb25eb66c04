"""
Startup trigger contract and the lifecycle hook that fires triggers.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from autostart.database.broker import DBBroker

logger = logging.getLogger(__name__)


class StartupTrigger(ABC):
    """Code run once when the database has finished starting."""

    @abstractmethod
    async def execute(self, broker: DBBroker, params: Mapping[str, Sequence[Any]]) -> None:
        ...


async def run_startup_triggers(
    broker: DBBroker,
    triggers: Sequence[StartupTrigger],
    params: Mapping[str, Sequence[Any]],
) -> None:
    """Fire each trigger in order; a failing trigger does not stop the others."""
    for trigger in triggers:
        name = type(trigger).__name__
        try:
            await trigger.execute(broker, params)
        except Exception as e:
            logger.error(f"Startup trigger {name} failed: {e}", exc_info=True)
