"""
Creation of the autostart collection.
"""
import logging

from autostart.database.broker import DBBroker
from autostart.database.layout import AUTOSTART_COLLECTION

logger = logging.getLogger(__name__)


async def create_autostart_collection(broker: DBBroker) -> None:
    """
    Create the autostart collection owned by SYSTEM and the dba group.

    Runs in a single transaction. Failures are logged and the transaction is
    rolled back; they never reach the caller.
    """
    logger.debug(f"Creating {AUTOSTART_COLLECTION}")

    txn_manager = broker.transaction_manager
    try:
        txn = await txn_manager.begin_transaction()
    except Exception as e:
        logger.error(f"Cannot create {AUTOSTART_COLLECTION}: {e}", exc_info=True)
        return

    try:
        created = await broker.get_or_create_collection(txn, AUTOSTART_COLLECTION)

        # Set ownership
        security = broker.security_manager
        created.permissions.owner = security.get_system_subject().name
        created.permissions.group = security.get_dba_group()
        await broker.save_collection(txn, created)
        await broker.flush()

        await txn_manager.commit(txn)
        logger.debug("Finished creation of collection")

    except Exception as e:
        logger.error(f"Failed to create {AUTOSTART_COLLECTION}: {e}", exc_info=True)
        await txn_manager.abort(txn)

    finally:
        await txn_manager.close(txn)
