"""
Tokenizer - Split revision text into a word-level token sequence

Lines are split on "\n", "\r\n" and "\r", each line on single spaces with the
spaces kept as tokens, so the diff has fidelity to the original text and
whitespace-only edits show up as changes.
"""

from __future__ import annotations

import re
from typing import Iterable

LINE_BREAK = "\n"
# Second space of every consecutive pair, so runs of spaces alternate " ", DOUBLE_SPACE.
# Lines never contain "\r", so no word token can equal it.
DOUBLE_SPACE = "\r "
SPACE = " "

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")
_SPACE_SPLIT = re.compile(r"( )")

TokenSequence = tuple[str, ...]


def _split_line(line: str) -> list[str]:
    """Split a line on single spaces, keeping every space as its own token"""
    return [token for token in _SPACE_SPLIT.split(line) if token]


def _collapse_spaces(raw_tokens: Iterable[str]) -> list[str]:
    """Replace a space following a space with DOUBLE_SPACE"""
    tokens: list[str] = []
    previous: str | None = None
    for token in raw_tokens:
        if token == SPACE and previous == SPACE:
            token = DOUBLE_SPACE
        tokens.append(token)
        previous = token
    return tokens


def _split_lines(text: str) -> list[str]:
    """Split on "\\r\\n", "\\r" or "\\n" only; a terminator at the end adds no line"""
    lines = _LINE_SPLIT.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def tokenize(text: str) -> TokenSequence:
    """Turn text into an immutable token sequence, one LINE_BREAK per line"""
    tokens: list[str] = []
    for line in _split_lines(text):
        tokens.extend(_collapse_spaces(_split_line(line)))
        tokens.append(LINE_BREAK)
    return tuple(tokens)


def detokenize(tokens: Iterable[str]) -> str:
    """Join tokens back into text, DOUBLE_SPACE becoming a plain space again"""
    return "".join(SPACE if token == DOUBLE_SPACE else token for token in tokens)
