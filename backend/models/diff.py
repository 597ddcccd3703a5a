"""Diff-related data models"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class UnchangedSegment(BaseModel):
    """Run of original tokens present in both revisions"""

    kind: Literal["unchanged"] = "unchanged"
    tokens: list[str]


class InsertedSegment(BaseModel):
    """Tokens only present in the new revision"""

    kind: Literal["inserted"] = "inserted"
    tokens: list[str]
    anchor: int  # 1-indexed change group


class DeletedSegment(BaseModel):
    """Tokens only present in the old revision"""

    kind: Literal["deleted"] = "deleted"
    tokens: list[str]
    anchor: int  # shared with the InsertedSegment of the same group


class ElidedSegment(BaseModel):
    """Marker for a long unchanged run that was left out"""

    kind: Literal["elided"] = "elided"
    skipped: int  # number of omitted original tokens


Segment = Annotated[
    Union[UnchangedSegment, InsertedSegment, DeletedSegment, ElidedSegment],
    Field(discriminator="kind"),
]

CHANGE_SEGMENTS = (InsertedSegment, DeletedSegment)


class DiffStats(BaseModel):
    """Token counts per segment kind"""

    unchanged: int = 0
    inserted: int = 0
    deleted: int = 0
    elided: int = 0


class DiffRequest(BaseModel):
    """Request to diff two revisions of a document"""

    old_text: str
    new_text: str
    context_limit: int | None = Field(default=None, ge=0)  # None = use configured limit


class DiffResult(BaseModel):
    """Complete word-level diff between two revisions"""

    segments: list[Segment]
    change_count: int  # number of change groups, i.e. the highest anchor
    has_changes: bool
    navigation: bool = True  # whether renderers should link between changes
    context_limit: int | None = None  # limit that was applied, None = unbounded
    stats: DiffStats = Field(default_factory=DiffStats)


class DiffStreamEvent(BaseModel):
    """SSE stream event"""

    type: str  # "segment", "done", "error"
    segment: Segment | None = None
    change_count: int | None = None
    done: bool = False
    error: str | None = None
