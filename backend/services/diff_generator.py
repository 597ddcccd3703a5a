"""
Diff Generator Service - Word-level contextual diffs between two revisions
"""

from __future__ import annotations

import logging
from typing import Iterable

from models.diff import (
    CHANGE_SEGMENTS,
    DeletedSegment,
    DiffResult,
    DiffStats,
    ElidedSegment,
    InsertedSegment,
    Segment,
    UnchangedSegment,
)

from .change_merger import merge
from .edit_script import diff
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


def render_diff(old_text: str, new_text: str, context_limit: int | None = None) -> list[Segment]:
    """Tokenize both revisions, diff them and merge the deltas into segments.

    ``context_limit`` caps how many unchanged tokens are shown on each side of
    a change; ``None`` shows everything. Identical texts give a stream with no
    Inserted/Deleted segments, so use ``has_changes`` rather than testing the
    list for emptiness.
    """
    alpha = tokenize(old_text)
    beta = tokenize(new_text)
    deltas = diff(alpha, beta)
    return merge(alpha, deltas, context_limit)


def has_changes(segments: Iterable[Segment]) -> bool:
    """True if any segment is an insertion or deletion"""
    return any(isinstance(segment, CHANGE_SEGMENTS) for segment in segments)


def change_count(segments: Iterable[Segment]) -> int:
    """Number of change groups, i.e. distinct anchors"""
    return len({segment.anchor for segment in segments if isinstance(segment, CHANGE_SEGMENTS)})


def segment_stats(segments: Iterable[Segment]) -> DiffStats:
    """Count tokens per segment kind"""
    stats = DiffStats()
    for segment in segments:
        if isinstance(segment, UnchangedSegment):
            stats.unchanged += len(segment.tokens)
        elif isinstance(segment, InsertedSegment):
            stats.inserted += len(segment.tokens)
        elif isinstance(segment, DeletedSegment):
            stats.deleted += len(segment.tokens)
        elif isinstance(segment, ElidedSegment):
            stats.elided += segment.skipped
    return stats


class DiffGenerator:
    """Generate contextual word-level diffs"""

    def __init__(self, context_limit: int | None = None, navigation: bool = True):
        self.context_limit = context_limit
        self.navigation = navigation

    def render(self, old_content: str, new_content: str, context_limit: int | None = None) -> list[Segment]:
        """Segments for two revisions, falling back to the generator's limit"""
        limit = self.context_limit if context_limit is None else context_limit
        return render_diff(old_content, new_content, limit)

    def generate_diff(
        self,
        old_content: str,
        new_content: str,
        context_limit: int | None = None,
    ) -> DiffResult:
        """Generate structured diff from old and new content"""
        limit = self.context_limit if context_limit is None else context_limit
        logger.debug(f"Generating diff: old={len(old_content)} chars, new={len(new_content)} chars, limit={limit}")

        segments = render_diff(old_content, new_content, limit)
        result = DiffResult(
            segments=segments,
            change_count=change_count(segments),
            has_changes=has_changes(segments),
            navigation=self.navigation,
            context_limit=limit,
            stats=segment_stats(segments),
        )

        logger.info(
            f"Diff complete: {len(segments)} segments, {result.change_count} changes "
            f"(+{result.stats.inserted}, -{result.stats.deleted}, ~{result.stats.elided} elided)"
        )
        return result
