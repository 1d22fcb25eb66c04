"""
Document store layout.
MongoDB collections backing the hierarchical database, plus well-known paths.
"""

ROOT_COLLECTION = "/db"
SYSTEM_COLLECTION = "/db/system"
AUTOSTART_COLLECTION = "/db/system/autostart"

# Prefix for locators handed to the source resolver
EMBEDDED_SERVER_URI_PREFIX = "xmldb:exist://"


class Collections:
    """MongoDB collection names in the store database."""
    COLLECTIONS = "collections"
    DOCUMENTS = "documents"
    METADATA = "_metadata"


# Manifest for registry
DB_MANIFEST = {
    "purpose": "Hierarchical document store backing the autostart trigger",
    "collections": [Collections.COLLECTIONS, Collections.DOCUMENTS, Collections.METADATA],
    "access_level": "system",
}


def normalize_path(path: str) -> str:
    """Strip trailing and duplicate slashes from an absolute database path."""
    segments = [s for s in path.split("/") if s]
    return "/" + "/".join(segments)


def parent_path(path: str) -> str | None:
    """Return the parent collection path, or None for the root."""
    path = normalize_path(path)
    if path == ROOT_COLLECTION or "/" not in path.strip("/"):
        return None
    return path.rsplit("/", 1)[0]


def ancestor_paths(path: str) -> list[str]:
    """All paths from the first segment down to `path` itself, e.g. /db, /db/system."""
    segments = normalize_path(path).strip("/").split("/")
    return ["/" + "/".join(segments[: i + 1]) for i in range(len(segments))]
