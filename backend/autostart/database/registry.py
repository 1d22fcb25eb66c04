"""
Store metadata and index management.
Ensures the store database is described and indexed on startup.
"""
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase

from autostart.database.layout import DB_MANIFEST, Collections


async def sync_registry(db: AsyncIOMotorDatabase) -> None:
    """
    Synchronize the store metadata on startup.
    Upserts the db_metadata entry in the store's _metadata collection.
    """
    metadata_collection = db[Collections.METADATA]
    await metadata_collection.update_one(
        {"_id": "db_metadata"},
        {
            "$set": {
                "db_name": db.name,
                "purpose": DB_MANIFEST["purpose"],
                "collections": DB_MANIFEST["collections"],
                "access_level": DB_MANIFEST["access_level"],
                "schema_version": "1.0",
                "last_updated_at": datetime.now(timezone.utc),
            },
            "$setOnInsert": {
                "created_at": datetime.now(timezone.utc),
            }
        },
        upsert=True,
    )


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the indexes used for collection listing."""
    await db[Collections.COLLECTIONS].create_index("parent")
    await db[Collections.DOCUMENTS].create_index("collection")
