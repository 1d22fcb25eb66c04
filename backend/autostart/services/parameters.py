"""
Script paths declared in the startup trigger parameters.
"""
import logging
from typing import Any, Mapping, Sequence

from autostart.database.layout import EMBEDDED_SERVER_URI_PREFIX

logger = logging.getLogger(__name__)

XQUERY = "xquery"


def get_parameters(params: Mapping[str, Sequence[Any]]) -> list[str]:
    """Collect the 'xquery' parameter values as embedded locators, without duplicates."""
    paths: list[str] = []

    for key, values in params.items():
        # only the 'xquery' parameter is used
        if key != XQUERY:
            continue

        for value in values:
            if not isinstance(value, str):
                continue

            if value.startswith("/"):
                locator = EMBEDDED_SERVER_URI_PREFIX + value
                if locator not in paths:
                    paths.append(locator)
            else:
                logger.error(f"Path '{value}' should start with a '/'")

    logger.debug(f"Found {len(paths)} '{XQUERY}' entries.")

    return paths
