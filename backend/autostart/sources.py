"""
Resolve script locators to stored query sources.
"""
import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from autostart.database.broker import DBBroker
from autostart.database.layout import EMBEDDED_SERVER_URI_PREFIX, ROOT_COLLECTION

logger = logging.getLogger(__name__)


class DBSource(BaseModel):
    """Query source stored in the database."""
    path: str
    content: str
    last_modified: datetime

    @property
    def key(self) -> str:
        return f"{EMBEDDED_SERVER_URI_PREFIX}{self.path}"


def strip_locator(location: str) -> str:
    """Turn `xmldb:exist:///db/x.xq` into `/db/x.xq`; other strings pass through."""
    if location.startswith(EMBEDDED_SERVER_URI_PREFIX):
        return location[len(EMBEDDED_SERVER_URI_PREFIX):]
    return location


async def get_source(
    broker: DBBroker,
    location: str,
    context_path: Optional[str] = None,
) -> Optional[DBSource]:
    """
    Locate the source for a locator.

    Relative locations are resolved against `context_path`. Returns None when
    no stored resource exists at the resolved path.
    """
    path = strip_locator(location)
    if not path.startswith("/") and context_path:
        path = f"{strip_locator(context_path).rstrip('/')}/{path}"

    if not (path == ROOT_COLLECTION or path.startswith(ROOT_COLLECTION + "/")):
        logger.debug(f"Location '{location}' is outside the database")
        return None

    document = await broker.get_document(path)
    if document is None:
        return None

    return DBSource(
        path=document.path,
        content=document.content,
        last_modified=document.updated_at,
    )
