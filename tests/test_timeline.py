"""Unit tests for subconvert.timeline (overlap resolution)."""

import pytest

from subconvert.models import DialogueInterval
from subconvert.timeline import reconcile


def _iv(start_ms: int, end_ms: int, text: str, style: str = "Default") -> DialogueInterval:
    return DialogueInterval(
        start_ms=start_ms,
        end_ms=end_ms,
        start_str="",
        end_str="",
        text=text,
        style_name=style,
    )


def _spans(cues) -> list[tuple[int, int, str]]:
    return [(cue.start_ms, cue.end_ms, cue.text) for cue in cues]


class TestOverlap:
    def test_partial_overlap_splits_into_three(self):
        cues = reconcile([_iv(1000, 3000, "A"), _iv(2000, 4000, "B")])
        assert _spans(cues) == [
            (1000, 2000, "A"),
            (2000, 3000, "A\r\nB"),
            (3000, 4000, "B"),
        ]

    def test_contained_interval(self):
        cues = reconcile([_iv(0, 5000, "outer"), _iv(1000, 2000, "inner")])
        assert _spans(cues) == [
            (0, 1000, "outer"),
            (1000, 2000, "outer\r\ninner"),
            (2000, 5000, "outer"),
        ]

    def test_three_way_overlap(self):
        cues = reconcile([_iv(0, 10_000, "A"), _iv(1000, 8000, "B"), _iv(2000, 5000, "C")])
        assert _spans(cues) == [
            (0, 1000, "A"),
            (1000, 8000, "A\r\nB"),
            (8000, 10_000, "A"),
        ]

    def test_equal_starts_keep_document_order(self):
        cues = reconcile([_iv(0, 2000, "first"), _iv(0, 2000, "second")])
        assert _spans(cues) == [(0, 2000, "first\r\nsecond")]

    def test_unsorted_input_is_sorted(self):
        cues = reconcile([_iv(5000, 6000, "later"), _iv(1000, 2000, "earlier")])
        assert [cue.text for cue in cues] == ["earlier", "later"]

    def test_touching_lines_with_different_text(self):
        cues = reconcile([_iv(0, 1000, "one"), _iv(1000, 2000, "two")])
        assert _spans(cues) == [(0, 1000, "one"), (1000, 2000, "two")]

    def test_input_not_modified(self):
        intervals = [_iv(1000, 3000, "A"), _iv(2000, 4000, "B")]
        reconcile(intervals)
        assert intervals == [_iv(1000, 3000, "A"), _iv(2000, 4000, "B")]


class TestIdenticalText:
    def test_overlapping_duplicates_merge(self):
        cues = reconcile([_iv(0, 2000, "same"), _iv(1000, 3000, "same")])
        assert _spans(cues) == [(0, 3000, "same")]

    def test_touching_duplicates_merge(self):
        cues = reconcile([_iv(0, 1000, "same"), _iv(1000, 2000, "same")])
        assert _spans(cues) == [(0, 2000, "same")]

    def test_contained_duplicate_does_not_shrink(self):
        cues = reconcile([_iv(0, 5000, "same"), _iv(1000, 2000, "same")])
        assert _spans(cues) == [(0, 5000, "same")]

    def test_separated_duplicates_stay_apart(self):
        cues = reconcile([_iv(0, 1000, "same"), _iv(2000, 3000, "same")])
        assert len(cues) == 2


class TestMinimumDuration:
    def test_at_minimum_dropped(self):
        assert reconcile([_iv(0, 300, "blink")]) == []

    def test_above_minimum_kept(self):
        assert _spans(reconcile([_iv(0, 301, "short")])) == [(0, 301, "short")]

    def test_custom_minimum(self):
        assert reconcile([_iv(0, 1000, "x")], min_duration_ms=1000) == []
        assert len(reconcile([_iv(0, 1000, "x")], min_duration_ms=0)) == 1

    def test_short_split_part_dropped(self):
        """A 100 ms lead-in before the second line is not emitted."""
        cues = reconcile([_iv(0, 3000, "A"), _iv(100, 3000, "B")])
        assert _spans(cues) == [(100, 3000, "A\r\nB")]

    def test_empty_input(self):
        assert reconcile([]) == []


class TestCueFields:
    def test_voice_from_style(self):
        cues = reconcile([_iv(0, 1000, "a", style="Sign"), _iv(2000, 3000, "b", style="")])
        assert cues[0].voice_style_id == "Sign"
        assert cues[1].voice_style_id is None

    def test_shared_part_uses_first_lines_style(self):
        cues = reconcile([_iv(0, 2000, "A", style="Top"), _iv(1000, 3000, "B", style="Bottom")])
        assert [cue.voice_style_id for cue in cues] == ["Top", "Top", "Bottom"]

    def test_inline_css_carried(self):
        styled = DialogueInterval(0, 1000, "", "", "x", inline_style_css="color: red;\r\n}\r\n")
        (cue,) = reconcile([styled])
        assert cue.inline_style_css == "color: red;\r\n}\r\n"
        assert cue.cue_id == "x1"


@pytest.mark.parametrize("intervals", [
    [_iv(0, 4000, "A"), _iv(1000, 2000, "B"), _iv(1500, 6000, "C"), _iv(7000, 9000, "D")],
    [_iv(0, 1000, "A"), _iv(0, 5000, "B"), _iv(4000, 4500, "B"), _iv(4900, 8000, "E")],
    [_iv(2000, 9000, "long"), _iv(3000, 3500, "x"), _iv(3000, 3500, "y"), _iv(8000, 12_000, "z")],
])
def test_cues_numbered_and_non_overlapping(intervals):
    cues = reconcile(intervals)
    assert [cue.index for cue in cues] == list(range(1, len(cues) + 1))
    for cue in cues:
        assert cue.end_ms - cue.start_ms > 300
    for earlier, later in zip(cues, cues[1:]):
        assert earlier.end_ms <= later.start_ms
