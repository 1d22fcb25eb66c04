"""
Security subjects, groups and collection permissions.
"""
from pydantic import BaseModel, Field


SYSTEM_USER = "SYSTEM"
GUEST_USER = "guest"
DBA_GROUP = "dba"
GUEST_GROUP = "guest"

DEFAULT_COLLECTION_MODE = 0o755

# Read bits for owner / group / other
_OWNER_READ = 0o400
_GROUP_READ = 0o040
_OTHER_READ = 0o004


class Subject(BaseModel):
    """An authenticated database identity."""
    name: str
    groups: list[str] = Field(default_factory=list)

    @property
    def is_dba(self) -> bool:
        return DBA_GROUP in self.groups


class Permission(BaseModel):
    """Ownership and mode bits of a collection or document."""
    owner: str = SYSTEM_USER
    group: str = DBA_GROUP
    mode: int = DEFAULT_COLLECTION_MODE

    def can_read(self, subject: Subject) -> bool:
        """Check POSIX-style read access; DBA members bypass mode bits."""
        if subject.is_dba:
            return True
        if subject.name == self.owner:
            return bool(self.mode & _OWNER_READ)
        if self.group in subject.groups:
            return bool(self.mode & _GROUP_READ)
        return bool(self.mode & _OTHER_READ)


class SecurityManager:
    """Hands out the well-known subjects of the database."""

    def __init__(self):
        self._system = Subject(name=SYSTEM_USER, groups=[DBA_GROUP])
        self._guest = Subject(name=GUEST_USER, groups=[GUEST_GROUP])

    def get_system_subject(self) -> Subject:
        return self._system

    def get_guest_subject(self) -> Subject:
        return self._guest

    def get_dba_group(self) -> str:
        return DBA_GROUP
