"""
Edit-Script Engine - Compute the ordered Insert/Delete/Replace deltas between
two token sequences

The common prefix and suffix are trimmed first. The rest is encoded one token
per character and handed to diff_match_patch, whose bisect is the
linear-space (middle snake) form of Eugene W. Myers' O(ND) algorithm ("An
O(ND) Difference Algorithm and Its Variations", 1986). Every maximal run of
edits between two matched tokens becomes exactly one Delta.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

import diff_match_patch as dmp_module

from .tokenizer import TokenSequence

logger = logging.getLogger(__name__)


class DiffError(Exception):
    """Base class for failures raised by the diff pipeline"""


class DiffFailed(DiffError, RuntimeError):
    """The shortest edit script could not be computed"""


class DeltaKind(str, Enum):
    """Elementary edit operations"""

    INSERT = "insert"
    DELETE = "delete"
    REPLACE = "replace"


@dataclass(frozen=True)
class Chunk:
    """Inclusive index range [first, last] into a token sequence.

    An empty chunk has ``last == first - 1`` and marks the position where the
    other side's tokens were inserted or removed.
    """

    first: int
    last: int
    sequence: TokenSequence = field(default=(), repr=False, compare=False)

    @classmethod
    def empty(cls, position: int, sequence: TokenSequence = ()) -> "Chunk":
        return cls(position, position - 1, sequence)

    @property
    def size(self) -> int:
        return self.last - self.first + 1

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    @property
    def tokens(self) -> TokenSequence:
        return self.sequence[self.first : self.last + 1]


@dataclass(frozen=True)
class Delta:
    """One edit operation, referencing the original and revised chunks"""

    kind: DeltaKind
    original: Chunk
    revised: Chunk


def _common_prefix(alpha: Sequence[str], beta: Sequence[str]) -> int:
    limit = min(len(alpha), len(beta))
    i = 0
    while i < limit and alpha[i] == beta[i]:
        i += 1
    return i


def _common_suffix(alpha: Sequence[str], beta: Sequence[str], prefix: int) -> int:
    limit = min(len(alpha), len(beta)) - prefix
    i = 0
    while i < limit and alpha[-1 - i] == beta[-1 - i]:
        i += 1
    return i


def _encode(alpha: Sequence[str], beta: Sequence[str]) -> tuple[str, str]:
    """Map every distinct token to one character, in order of first appearance"""
    codes: dict[str, str] = {}

    def encode(tokens: Sequence[str]) -> str:
        chars = []
        for token in tokens:
            char = codes.get(token)
            if char is None:
                if len(codes) > sys.maxunicode:
                    raise DiffFailed(f"Too many distinct tokens ({len(codes) + 1})")
                char = codes[token] = chr(len(codes))
            chars.append(char)
        return "".join(chars)

    return encode(alpha), encode(beta)


def _edit_runs(alpha: Sequence[str], beta: Sequence[str]) -> list[tuple[int, int]]:
    """Return the shortest edit script as (operation, length) runs.

    The search is diff_match_patch's bisect, the linear-space middle-snake
    variant of Myers' algorithm. With no timeout it always runs to the end, so
    the script is minimal.
    """
    text1, text2 = _encode(alpha, beta)
    dmp = dmp_module.diff_match_patch()
    dmp.Diff_Timeout = 0
    return [(op, len(data)) for op, data in dmp.diff_main(text1, text2, False)]


def _make_delta(
    alpha: TokenSequence,
    beta: TokenSequence,
    orig_first: int,
    orig_end: int,
    rev_first: int,
    rev_end: int,
) -> Delta:
    original = Chunk(orig_first, orig_end - 1, alpha)
    revised = Chunk(rev_first, rev_end - 1, beta)
    if original.is_empty:
        kind = DeltaKind.INSERT
    elif revised.is_empty:
        kind = DeltaKind.DELETE
    else:
        kind = DeltaKind.REPLACE
    return Delta(kind=kind, original=original, revised=revised)


def diff(alpha: TokenSequence, beta: TokenSequence) -> list[Delta]:
    """Compute the edit script turning alpha into beta.

    Deltas come back ordered by ``original.first``; identical sequences give
    an empty list. Raises DiffFailed if the search cannot be run.
    """
    prefix = _common_prefix(alpha, beta)
    suffix = _common_suffix(alpha, beta, prefix)
    alpha_end = len(alpha) - suffix
    beta_end = len(beta) - suffix

    try:
        runs = _edit_runs(alpha[prefix:alpha_end], beta[prefix:beta_end])
    except DiffFailed:
        logger.error("Diff generation failed", exc_info=True)
        raise

    deltas: list[Delta] = []
    i, j = prefix, prefix
    start: tuple[int, int] | None = None
    for op, length in runs:
        if op == dmp_module.diff_match_patch.DIFF_EQUAL:
            if start is not None:
                deltas.append(_make_delta(alpha, beta, start[0], i, start[1], j))
                start = None
            i += length
            j += length
            continue
        if start is None:
            start = (i, j)
        if op == dmp_module.diff_match_patch.DIFF_DELETE:
            i += length
        else:
            j += length
    if start is not None:
        deltas.append(_make_delta(alpha, beta, start[0], i, start[1], j))

    logger.debug(
        f"Edit script: {len(alpha)} -> {len(beta)} tokens, "
        f"prefix={prefix}, suffix={suffix}, deltas={len(deltas)}"
    )
    return deltas
