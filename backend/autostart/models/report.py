"""
Per-script results and the summary of one startup trigger run.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from autostart.models.collection import utc_now


class ScriptOrigin(str, Enum):
    """Discovery source a locator came from."""
    COLLECTION = "collection"
    PARAMETER = "parameter"


class ScriptStatus(str, Enum):
    """Outcome of one script execution."""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class ScriptResult(BaseModel):
    """Outcome of executing a single locator."""
    locator: str
    origin: ScriptOrigin
    status: ScriptStatus
    result: Optional[str] = Field(None, description="Rendered query result")
    error: Optional[str] = Field(None, description="Failure message")
    started_at: datetime = Field(default_factory=utc_now)
    finished_at: Optional[datetime] = None

    class Config:
        use_enum_values = True


class TriggerReport(BaseModel):
    """Summary of one startup trigger run."""
    trigger: str
    started_at: datetime = Field(default_factory=utc_now)
    finished_at: Optional[datetime] = None
    results: list[ScriptResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.status == ScriptStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status == ScriptStatus.FAILED)

    @property
    def not_found(self) -> int:
        return sum(1 for r in self.results if r.status == ScriptStatus.NOT_FOUND)

    def summary(self) -> dict:
        """Serializable view used by the health endpoint."""
        return {
            **self.model_dump(mode="json"),
            "succeeded": self.succeeded,
            "failed": self.failed,
            "not_found": self.not_found,
        }
