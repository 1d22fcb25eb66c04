"""
Transaction management on top of MongoDB client sessions.

A `Txn` wraps one motor session with an open multi-document transaction.
When transactions are disabled (standalone server, tests) the transaction
carries no session and every write is applied immediately. Such a
transaction remembers the documents it inserted so that abort can remove
them again.
"""
import itertools
import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from autostart.exceptions import TransactionError

logger = logging.getLogger(__name__)

_txn_ids = itertools.count(1)


class Txn:
    """A single transaction handle."""

    def __init__(self, session: Optional[AsyncIOMotorClientSession] = None):
        self.id = next(_txn_ids)
        self.session = session
        self.state = "started"
        self.inserted: list[tuple[AsyncIOMotorCollection, Any]] = []

    def __repr__(self) -> str:
        return f"Txn(id={self.id}, state={self.state})"

    def track_insert(self, collection: AsyncIOMotorCollection, doc_id: Any) -> None:
        """Record an upserted document; only needed without a session."""
        if self.session is None and doc_id is not None:
            self.inserted.append((collection, doc_id))


class TransactionManager:
    """Begins, commits, aborts and closes transactions."""

    def __init__(self, client: AsyncIOMotorClient, use_transactions: bool = True):
        self.client = client
        self.use_transactions = use_transactions

    async def begin_transaction(self) -> Txn:
        if not self.use_transactions:
            return Txn()
        try:
            session = await self.client.start_session()
            session.start_transaction()
        except PyMongoError as e:
            raise TransactionError(f"Could not begin transaction: {e}") from e
        return Txn(session)

    async def commit(self, txn: Txn) -> None:
        if txn.session is not None:
            try:
                await txn.session.commit_transaction()
            except PyMongoError as e:
                raise TransactionError(f"Could not commit {txn}: {e}") from e
        txn.inserted.clear()
        txn.state = "committed"

    async def abort(self, txn: Txn) -> None:
        """Roll back; failures are logged since abort runs on error paths."""
        if txn.state != "started":
            return
        if txn.session is not None and txn.session.in_transaction:
            try:
                await txn.session.abort_transaction()
            except PyMongoError as e:
                logger.error(f"Failed to abort {txn}: {e}")
        else:
            await self._undo_inserts(txn)
        txn.state = "aborted"

    async def _undo_inserts(self, txn: Txn) -> None:
        for collection, doc_id in reversed(txn.inserted):
            try:
                await collection.delete_one({"_id": doc_id})
            except PyMongoError as e:
                logger.error(f"Failed to undo insert of {doc_id!r} in {txn}: {e}")
        txn.inserted.clear()

    async def close(self, txn: Txn) -> None:
        if txn.state == "closed":
            return
        if txn.state == "started":
            await self.abort(txn)
        if txn.session is not None:
            await txn.session.end_session()
        txn.state = "closed"
