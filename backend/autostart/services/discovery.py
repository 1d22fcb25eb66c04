"""
Discovery of XQuery scripts stored in the autostart collection.
"""
import logging

from autostart.database.broker import DBBroker
from autostart.database.layout import AUTOSTART_COLLECTION, EMBEDDED_SERVER_URI_PREFIX
from autostart.database.locks import LockMode
from autostart.exceptions import PermissionDeniedError
from autostart.services.bootstrap import create_autostart_collection

logger = logging.getLogger(__name__)

XQUERY_EXTENSIONS = (".xq", ".xquery", ".xqy")


def is_xquery(path: str) -> bool:
    return path.endswith(XQUERY_EXTENSIONS)


async def get_scripts_in_startup_collection(broker: DBBroker) -> list[str]:
    """
    List the XQuery scripts in /db/system/autostart as embedded locators.

    Scripts come back in storage order, which is not sorted. A missing
    collection is created and yields no scripts for this run.
    """
    paths: list[str] = []
    bootstrap = False

    try:
        async with broker.open_collection(AUTOSTART_COLLECTION, LockMode.READ) as collection:
            if collection is None:
                logger.debug(f"Collection '{AUTOSTART_COLLECTION}' not found.")
                bootstrap = True
            else:
                logger.debug(f"Scanning collection '{AUTOSTART_COLLECTION}'.")
                async for document in collection.iter_documents_no_lock():
                    if is_xquery(document.path):
                        paths.append(EMBEDDED_SERVER_URI_PREFIX + document.path)
                    else:
                        logger.debug(f"Skipped document '{document.path}', not an xquery script.")

        logger.debug(f"Found {len(paths)} xquery scripts in '{AUTOSTART_COLLECTION}'.")

    except PermissionDeniedError as e:
        logger.error(str(e))

    if bootstrap:
        await create_autostart_collection(broker)

    return paths
