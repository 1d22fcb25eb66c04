"""
Collection and document models for the document store.
"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from autostart.security import DEFAULT_COLLECTION_MODE, Permission


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CollectionRecord(BaseModel):
    """
    Collection document model for the `collections` MongoDB collection.

    The database path doubles as the MongoDB `_id`.
    """
    path: str = Field(..., alias="_id", description="Absolute database path, e.g. /db/system")
    parent: Optional[str] = Field(None, description="Path of the parent collection, None for /db")
    name: str = Field(..., description="Last path segment")
    owner: str = Field(..., description="Owning subject name")
    group: str = Field(..., description="Owning group name")
    mode: int = Field(default=DEFAULT_COLLECTION_MODE, description="POSIX-like mode bits")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Config:
        populate_by_name = True

    @property
    def permissions(self) -> Permission:
        return Permission(owner=self.owner, group=self.group, mode=self.mode)


class DocumentRecord(BaseModel):
    """
    Stored resource model for the `documents` MongoDB collection.
    """
    path: str = Field(..., alias="_id", description="Absolute database path of the resource")
    collection: str = Field(..., description="Path of the containing collection")
    name: str = Field(..., description="Resource file name")
    content: str = Field(default="", description="Resource body")
    mime_type: str = Field(default="application/xquery")
    owner: str = Field(...)
    group: str = Field(...)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Config:
        populate_by_name = True
