"""
Database connection management for MongoDB.
"""
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from autostart.config import get_settings
from autostart.database.broker import DBBroker
from autostart.query import load_query_service

# Global connection instances
_mongo_client: Optional[AsyncIOMotorClient] = None
_broker: Optional[DBBroker] = None


async def get_mongo_client() -> AsyncIOMotorClient:
    """Get or create MongoDB client."""
    global _mongo_client
    if _mongo_client is None:
        settings = get_settings()
        _mongo_client = AsyncIOMotorClient(settings.mongo_uri)
    return _mongo_client


async def get_database(db_name: Optional[str] = None) -> AsyncIOMotorDatabase:
    """Get the store database, or another MongoDB database by name."""
    client = await get_mongo_client()
    return client[db_name or get_settings().database_name]


async def get_broker() -> DBBroker:
    """Get or create the system broker, with the configured query runtime attached."""
    global _broker
    if _broker is None:
        settings = get_settings()
        client = await get_mongo_client()
        _broker = DBBroker(
            client,
            settings.database_name,
            query_service=load_query_service(settings.query_service),
            use_transactions=settings.use_transactions,
        )
    return _broker


async def close_connections():
    """Close all database connections."""
    global _mongo_client, _broker

    _broker = None

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None
