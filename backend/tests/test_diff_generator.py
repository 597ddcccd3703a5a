"""
Tests for the Diff Generator
============================
End-to-end rendering of two revisions into a segment stream.
"""

import pytest

from models.diff import (
    DeletedSegment,
    DiffResult,
    ElidedSegment,
    InsertedSegment,
    UnchangedSegment,
)
from services.diff_generator import (
    DiffGenerator,
    change_count,
    has_changes,
    render_diff,
    segment_stats,
)
from services.tokenizer import DOUBLE_SPACE, tokenize

REVISION_PAIRS = [
    ("", ""),
    ("", "new line"),
    ("old line", ""),
    ("The cat sat", "The dog sat"),
    ("a b c d e f g", "a c d x f g y"),
    ("first line\nsecond line\nthird line", "first line\nsecond  line\nthird line\nfourth"),
    ("Some  spaced   text", "Some spaced text"),
    ("same\nsame\nsame", "same\nother\nsame\nsame"),
    ("one two three four five six", "six five four three two one"),
]


def tokens_of(segments, *kinds):
    tokens = []
    for segment in segments:
        if segment.kind in kinds:
            tokens.extend(segment.tokens)
    return tuple(tokens)


def numbered_lines(count):
    return "\n".join(f"w{i}" for i in range(count))


class TestScenarios:
    """Concrete revision pairs."""

    def test_identical_texts(self):
        segments = render_diff("hello world", "hello world")

        assert segments == [UnchangedSegment(tokens=["hello", " ", "world", "\n"])]
        assert not has_changes(segments)

    def test_single_word_replaced(self):
        segments = render_diff("The cat sat", "The dog sat")

        assert segments == [
            UnchangedSegment(tokens=["The", " "]),
            InsertedSegment(tokens=["dog"], anchor=1),
            DeletedSegment(tokens=["cat"], anchor=1),
            UnchangedSegment(tokens=[" ", "sat", "\n"]),
        ]

    def test_insert_into_empty_text(self):
        segments = render_diff("", "new line")

        assert segments == [InsertedSegment(tokens=["new", " ", "line", "\n"], anchor=1)]

    def test_both_empty(self):
        assert render_diff("", "") == []

    def test_edit_inside_long_unchanged_text(self):
        """A two-token deletion in 500 tokens shows 10 tokens of context each side."""
        old = numbered_lines(250)
        new = "\n".join(f"w{i}" for i in range(250) if i != 125)

        segments = render_diff(old, new, 10)
        old_tokens = tokenize(old)

        assert [s.kind for s in segments] == [
            "unchanged",
            "elided",
            "unchanged",
            "deleted",
            "unchanged",
            "elided",
            "unchanged",
        ]
        assert segments[0].tokens == list(old_tokens[:10])
        assert segments[1] == ElidedSegment(skipped=230)
        assert segments[2].tokens == list(old_tokens[240:250])
        assert segments[3] == DeletedSegment(tokens=["w125", "\n"], anchor=1)
        assert segments[4].tokens == list(old_tokens[252:262])
        assert segments[5] == ElidedSegment(skipped=228)
        assert segments[6].tokens == list(old_tokens[490:500])

    def test_whitespace_only_edit(self):
        segments = render_diff("a b", "a  b")

        assert segments == [
            UnchangedSegment(tokens=["a", " "]),
            InsertedSegment(tokens=[DOUBLE_SPACE], anchor=1),
            UnchangedSegment(tokens=["b", "\n"]),
        ]

    def test_no_break_space_replacing_a_space_is_a_change(self):
        segments = render_diff("x  ", "x  ")

        assert has_changes(segments)
        assert InsertedSegment(tokens=[" "], anchor=1) in segments
        assert DeletedSegment(tokens=[DOUBLE_SPACE], anchor=1) in segments


class TestProperties:
    """Properties that hold for every pair of revisions."""

    @pytest.mark.parametrize("text", [text for pair in REVISION_PAIRS for text in pair])
    @pytest.mark.parametrize("limit", [None, 0, 1, 3])
    def test_same_text_has_no_changes(self, text, limit):
        assert not has_changes(render_diff(text, text, limit))

    @pytest.mark.parametrize("old,new", REVISION_PAIRS)
    def test_old_text_is_reconstructed(self, old, new):
        segments = render_diff(old, new)
        assert tokens_of(segments, "unchanged", "deleted") == tokenize(old)

    @pytest.mark.parametrize("old,new", REVISION_PAIRS)
    def test_new_text_is_reconstructed(self, old, new):
        segments = render_diff(old, new)
        assert tokens_of(segments, "unchanged", "inserted") == tokenize(new)

    @pytest.mark.parametrize("old,new", REVISION_PAIRS)
    def test_anchors_count_up_from_one(self, old, new):
        anchors = []
        for segment in render_diff(old, new):
            if segment.kind in ("inserted", "deleted") and segment.anchor not in anchors:
                anchors.append(segment.anchor)

        assert anchors == list(range(1, len(anchors) + 1))

    @pytest.mark.parametrize("limit", [0, 1, 4, 7])
    def test_elision_bound(self, limit):
        """Leading and trailing runs each keep exactly ``limit`` tokens per side."""
        old = numbered_lines(40)
        new = old.replace("w20", "changed")
        segments = render_diff(old, new, limit)

        leading = []
        for segment in segments:
            if segment.kind in ("inserted", "deleted"):
                break
            leading.append(segment)

        kept = [s for s in leading if s.kind == "unchanged"]
        elided = [s for s in leading if s.kind == "elided"]
        assert len(elided) == 1
        assert all(len(s.tokens) == limit for s in kept)
        assert len(kept) == (2 if limit else 0)
        assert elided[0].skipped == 40 - 2 * limit


class TestHelpers:
    """Tests for has_changes, change_count and segment_stats."""

    def test_unchanged_and_elided_only_is_not_a_change(self):
        segments = [UnchangedSegment(tokens=["a"]), ElidedSegment(skipped=3)]
        assert not has_changes(segments)
        assert change_count(segments) == 0

    def test_change_count_counts_groups(self):
        segments = render_diff("a b c d e f g", "a c d x f g y")
        assert change_count(segments) == max(
            s.anchor for s in segments if s.kind in ("inserted", "deleted")
        )

    def test_segment_stats(self):
        segments = [
            UnchangedSegment(tokens=["a", " "]),
            InsertedSegment(tokens=["x"], anchor=1),
            DeletedSegment(tokens=["b", " ", "c"], anchor=1),
            ElidedSegment(skipped=7),
        ]
        stats = segment_stats(segments)

        assert (stats.unchanged, stats.inserted, stats.deleted, stats.elided) == (2, 1, 3, 7)


class TestDiffGenerator:
    """Tests for the DiffGenerator service."""

    def test_generate_diff(self):
        result = DiffGenerator().generate_diff("The cat sat", "The dog sat")

        assert isinstance(result, DiffResult)
        assert result.has_changes
        assert result.change_count == 1
        assert result.navigation is True
        assert result.context_limit is None
        assert result.stats.inserted == 1
        assert result.stats.deleted == 1
        assert result.stats.unchanged == 5

    def test_no_changes(self):
        result = DiffGenerator().generate_diff("same", "same")

        assert not result.has_changes
        assert result.change_count == 0

    def test_default_limit_applies(self):
        generator = DiffGenerator(context_limit=1, navigation=False)
        result = generator.generate_diff("a b c d e f", "a b c d e g")

        assert result.context_limit == 1
        assert result.navigation is False
        assert result.segments[1] == ElidedSegment(skipped=8)

    def test_call_limit_overrides_default(self):
        generator = DiffGenerator(context_limit=1)
        result = generator.generate_diff("a b c d e f", "a b c d e g", context_limit=100)

        assert result.context_limit == 100
        assert not any(s.kind == "elided" for s in result.segments)

    def test_result_serializes(self):
        result = DiffGenerator().generate_diff("The cat", "The dog")
        data = result.model_dump()

        assert data["segments"][1] == {"kind": "inserted", "tokens": ["dog"], "anchor": 1}
        assert DiffResult.model_validate(data) == result
