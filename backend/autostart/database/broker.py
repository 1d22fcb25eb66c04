"""
Database broker: the access handle the startup trigger works against.

Collections and stored resources live in two MongoDB collections keyed by
their absolute database path. The broker adds collection locks, ownership
checks, transactions and the attached query runtime.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from motor.motor_asyncio import AsyncIOMotorClient

from autostart.database.layout import Collections, ancestor_paths, normalize_path, parent_path
from autostart.database.locks import LockMode, LockTable
from autostart.database.transactions import TransactionManager, Txn
from autostart.exceptions import AutostartError, PermissionDeniedError, QueryServiceUnavailableError
from autostart.models.collection import CollectionRecord, DocumentRecord
from autostart.security import DEFAULT_COLLECTION_MODE, Permission, SecurityManager, Subject

logger = logging.getLogger(__name__)


class Collection:
    """An opened collection. Valid only while its lock is held."""

    def __init__(self, broker: "DBBroker", record: CollectionRecord):
        self.broker = broker
        self.record = record
        self.permissions: Permission = record.permissions

    @property
    def path(self) -> str:
        return self.record.path

    async def iter_documents_no_lock(self) -> AsyncIterator[DocumentRecord]:
        """
        Iterate the collection's direct resources in storage order.

        Resources are not locked individually; the caller's collection lock
        covers the listing.
        """
        cursor = self.broker.documents.find({"collection": self.path})
        async for doc in cursor:
            yield DocumentRecord.model_validate(doc)


class DBBroker:
    """Access handle to the document store."""

    def __init__(
        self,
        client: AsyncIOMotorClient,
        database_name: str,
        subject: Optional[Subject] = None,
        security_manager: Optional[SecurityManager] = None,
        query_service=None,
        use_transactions: bool = True,
    ):
        self.client = client
        self.db = client[database_name]
        self.collections = self.db[Collections.COLLECTIONS]
        self.documents = self.db[Collections.DOCUMENTS]
        self.security_manager = security_manager or SecurityManager()
        self.subject = subject or self.security_manager.get_system_subject()
        self.transaction_manager = TransactionManager(client, use_transactions)
        self.locks = LockTable()
        self._query_service = query_service

    def _default_group(self) -> str:
        return self.subject.groups[0] if self.subject.groups else self.security_manager.get_dba_group()

    # ==================== Query Runtime ====================

    def get_query_service(self):
        if self._query_service is None:
            raise QueryServiceUnavailableError("No query service is configured for this broker")
        return self._query_service

    # ==================== Collections ====================

    @asynccontextmanager
    async def open_collection(self, path: str, mode: LockMode) -> AsyncIterator[Optional[Collection]]:
        """
        Open a collection under a lock of the given mode.

        Yields None when the collection does not exist; no lock is taken then.
        The lock is released when the block exits, whatever the exit path.
        """
        path = normalize_path(path)
        doc = await self.collections.find_one({"_id": path})
        if doc is None:
            yield None
            return

        await self.locks.acquire(path, mode)
        try:
            collection = Collection(self, CollectionRecord.model_validate(doc))
            if not collection.permissions.can_read(self.subject):
                raise PermissionDeniedError(self.subject.name, path)
            yield collection
        finally:
            await self.locks.release(path, mode)

    async def get_or_create_collection(self, txn: Txn, path: str) -> Collection:
        """Fetch a collection, creating it and any missing ancestors."""
        now = datetime.now(timezone.utc)
        for current in ancestor_paths(path):
            result = await self.collections.update_one(
                {"_id": current},
                {
                    "$setOnInsert": {
                        "parent": parent_path(current),
                        "name": current.rsplit("/", 1)[-1],
                        "owner": self.subject.name,
                        "group": self._default_group(),
                        "mode": DEFAULT_COLLECTION_MODE,
                        "created_at": now,
                        "updated_at": now,
                    }
                },
                upsert=True,
                session=txn.session,
            )
            txn.track_insert(self.collections, result.upserted_id)

        doc = await self.collections.find_one({"_id": normalize_path(path)}, session=txn.session)
        return Collection(self, CollectionRecord.model_validate(doc))

    async def save_collection(self, txn: Txn, collection: Collection) -> None:
        """Persist the collection's permissions under a write lock."""
        await self.locks.acquire(collection.path, LockMode.WRITE)
        try:
            await self.collections.update_one(
                {"_id": collection.path},
                {
                    "$set": {
                        "owner": collection.permissions.owner,
                        "group": collection.permissions.group,
                        "mode": collection.permissions.mode,
                        "updated_at": datetime.now(timezone.utc),
                    }
                },
                session=txn.session,
            )
        finally:
            await self.locks.release(collection.path, LockMode.WRITE)

    async def collection_exists(self, path: str, txn: Optional[Txn] = None) -> bool:
        session = txn.session if txn is not None else None
        return await self.collections.find_one({"_id": normalize_path(path)}, session=session) is not None

    async def flush(self) -> None:
        """Writes are acknowledged by MongoDB's write concern; nothing is buffered here."""
        logger.debug("Flush requested, no buffered state")

    # ==================== Documents ====================

    async def store_document(
        self,
        txn: Txn,
        collection_path: str,
        name: str,
        content: str,
        mime_type: str = "application/xquery",
    ) -> DocumentRecord:
        """Store (or replace) a resource in an existing collection."""
        collection_path = normalize_path(collection_path)
        if not await self.collection_exists(collection_path, txn):
            raise AutostartError(f"Collection '{collection_path}' not found")

        path = f"{collection_path}/{name}"
        now = datetime.now(timezone.utc)
        result = await self.documents.update_one(
            {"_id": path},
            {
                "$set": {
                    "collection": collection_path,
                    "name": name,
                    "content": content,
                    "mime_type": mime_type,
                    "updated_at": now,
                },
                "$setOnInsert": {
                    "owner": self.subject.name,
                    "group": self._default_group(),
                    "created_at": now,
                },
            },
            upsert=True,
            session=txn.session,
        )
        txn.track_insert(self.documents, result.upserted_id)
        doc = await self.documents.find_one({"_id": path}, session=txn.session)
        return DocumentRecord.model_validate(doc)

    async def get_document(self, path: str) -> Optional[DocumentRecord]:
        """Fetch a resource; read access is checked against its collection."""
        path = normalize_path(path)
        doc = await self.documents.find_one({"_id": path})
        if doc is None:
            return None

        record = DocumentRecord.model_validate(doc)
        async with self.open_collection(record.collection, LockMode.READ) as collection:
            if collection is None:
                return None
        return record
