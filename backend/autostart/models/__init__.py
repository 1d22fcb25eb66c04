"""
Pydantic models for stored collections/documents and trigger reports.
"""
from autostart.models.collection import CollectionRecord, DocumentRecord
from autostart.models.report import ScriptOrigin, ScriptResult, ScriptStatus, TriggerReport

__all__ = [
    "CollectionRecord",
    "DocumentRecord",
    "ScriptOrigin",
    "ScriptResult",
    "ScriptStatus",
    "TriggerReport",
]
