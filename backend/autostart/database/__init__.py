"""
Database module - MongoDB connection, document store broker, locks and transactions.
"""
from autostart.database.broker import Collection, DBBroker
from autostart.database.connections import (
    close_connections,
    get_broker,
    get_database,
    get_mongo_client,
)
from autostart.database.locks import LockMode

__all__ = [
    "Collection",
    "DBBroker",
    "LockMode",
    "close_connections",
    "get_broker",
    "get_database",
    "get_mongo_client",
]
