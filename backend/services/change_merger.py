"""
Change Merger - Coalesce an edit script into a renderable segment stream

Walks the deltas in original-sequence order, pulls adjacent deltas together
into change groups, and emits the unchanged runs in between, eliding the
middle of runs that are longer than twice the context limit.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from models.diff import (
    DeletedSegment,
    ElidedSegment,
    InsertedSegment,
    Segment,
    UnchangedSegment,
)

from .edit_script import Chunk, Delta, DeltaKind, DiffError
from .tokenizer import TokenSequence


class ContractViolation(DiffError, AssertionError):
    """Deltas handed to the merger are out of order, overlapping or malformed"""


class MergeMode(str, Enum):
    """What kind of change group is currently open"""

    IDLE = "idle"
    INSERT = "insert"
    DELETE = "delete"
    REPLACE = "replace"


class ChangeMerger:
    """State machine turning deltas into segments for one pair of revisions.

    A merger is single-use: feed it every delta with ``visit`` in order, then
    call ``finish`` to get the segments.
    """

    def __init__(self, alpha: TokenSequence, context_limit: int | None = None):
        if context_limit is not None and context_limit < 0:
            raise ValueError(f"context_limit must be >= 0, got {context_limit}")

        self.alpha = alpha
        self.context_limit = context_limit
        self.segments: list[Segment] = []

        self._position = 0  # next original index not yet emitted or consumed
        self._anchor = 1
        self._mode = MergeMode.IDLE
        self._removed: list[str] = []
        self._inserted: list[str] = []
        self._finished = False

    # ========== Delta Handling ==========

    def visit(self, delta: Delta) -> None:
        """Consume the next delta of the edit script"""
        if self._finished:
            raise ContractViolation("Merger already finished")
        self._check(delta)
        self._advance(delta.original)

        if delta.kind == DeltaKind.INSERT:
            if self._mode == MergeMode.DELETE:
                self._flush()
            self._inserted.extend(delta.revised.tokens)
            if self._mode != MergeMode.REPLACE:
                self._mode = MergeMode.INSERT
        elif delta.kind == DeltaKind.DELETE:
            if self._mode == MergeMode.INSERT:
                self._flush()
            self._removed.extend(delta.original.tokens)
            if self._mode != MergeMode.REPLACE:
                self._mode = MergeMode.DELETE
        elif delta.kind == DeltaKind.REPLACE:
            self._removed.extend(delta.original.tokens)
            self._inserted.extend(delta.revised.tokens)
            self._mode = MergeMode.REPLACE
        else:
            raise ContractViolation(f"Unknown delta kind: {delta.kind!r}")

    def finish(self) -> list[Segment]:
        """Flush the open group and emit the trailing unchanged run"""
        if not self._finished:
            self._flush()
            self._emit_unchanged(self._position, len(self.alpha))
            self._position = len(self.alpha)
            self._finished = True
        return self.segments

    def _check(self, delta: Delta) -> None:
        original = delta.original
        if original.first < self._position:
            raise ContractViolation(
                f"Delta at original index {original.first} overlaps or precedes "
                f"already consumed range ending at {self._position}"
            )
        if original.first < 0 or original.last >= len(self.alpha) or original.size < 0:
            raise ContractViolation(
                f"Original chunk [{original.first}, {original.last}] outside "
                f"sequence of {len(self.alpha)} tokens"
            )
        revised = delta.revised
        if revised.size < 0:
            raise ContractViolation(f"Malformed revised chunk [{revised.first}, {revised.last}]")
        if not revised.is_empty and (revised.first < 0 or revised.last >= len(revised.sequence)):
            raise ContractViolation(
                f"Revised chunk [{revised.first}, {revised.last}] outside "
                f"sequence of {len(revised.sequence)} tokens"
            )
        if delta.kind == DeltaKind.INSERT and not original.is_empty:
            raise ContractViolation("Insert delta with a non-empty original chunk")
        if delta.kind == DeltaKind.DELETE and not delta.revised.is_empty:
            raise ContractViolation("Delete delta with a non-empty revised chunk")

    def _advance(self, original: Chunk) -> None:
        """Emit the unchanged gap before ``original``; any gap closes the open group"""
        if original.first > self._position:
            self._flush()
            self._emit_unchanged(self._position, original.first)
        self._position = original.last + 1

    # ========== Output ==========

    def _emit_unchanged(self, start: int, end: int) -> None:
        length = end - start
        if length <= 0:
            return

        limit = self.context_limit
        if limit is None or length <= 2 * limit:
            self.segments.append(UnchangedSegment(tokens=list(self.alpha[start:end])))
            return

        if limit > 0:
            self.segments.append(UnchangedSegment(tokens=list(self.alpha[start : start + limit])))
        self.segments.append(ElidedSegment(skipped=length - 2 * limit))
        if limit > 0:
            self.segments.append(UnchangedSegment(tokens=list(self.alpha[end - limit : end])))

    def _flush(self) -> None:
        if self._inserted or self._removed:
            if self._inserted:
                self.segments.append(InsertedSegment(tokens=self._inserted, anchor=self._anchor))
            if self._removed:
                self.segments.append(DeletedSegment(tokens=self._removed, anchor=self._anchor))
            self._anchor += 1
            self._inserted = []
            self._removed = []

        # After a flush, everything is reset.
        self._mode = MergeMode.IDLE


def merge(
    alpha: TokenSequence,
    deltas: Iterable[Delta],
    context_limit: int | None = None,
) -> list[Segment]:
    """Coalesce ``deltas`` against ``alpha`` into an ordered segment list"""
    merger = ChangeMerger(alpha, context_limit)
    for delta in deltas:
        merger.visit(delta)
    return merger.finish()
