"""Models module - Pydantic data models"""

from .diff import (
    DeletedSegment,
    DiffRequest,
    DiffResult,
    DiffStats,
    DiffStreamEvent,
    ElidedSegment,
    InsertedSegment,
    Segment,
    UnchangedSegment,
)
from .config import ConfigResponse, ConfigUpdateRequest

__all__ = [
    # Segment models
    "Segment",
    "UnchangedSegment",
    "InsertedSegment",
    "DeletedSegment",
    "ElidedSegment",
    # Diff models
    "DiffRequest",
    "DiffResult",
    "DiffStats",
    "DiffStreamEvent",
    # Config models
    "ConfigResponse",
    "ConfigUpdateRequest",
]
