"""Overlap resolution: turn ASS dialogue intervals into a clean cue sequence.

ASS events may overlap freely (two speakers, fades between lines), while SRT
and WebVTT players expect one cue after another. The sweep below keeps a
single accumulator interval and, for each following interval:

- identical text overlapping or touching: widen the accumulator;
- different text overlapping: emit the accumulator-only part and the shared
  part (both texts), keep the remainder as the new accumulator;
- otherwise: emit the accumulator and move on.

Cues not longer than ``min_duration_ms`` are dropped; ASS animations often
produce very short events that would only flicker.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from subconvert.ass.timecode import format_ass_time
from subconvert.models import Cue, DialogueInterval

logger = logging.getLogger(__name__)

DEFAULT_MIN_DURATION_MS = 300
LINE_BREAK = "\r\n"


class _CueSink:
    """Collects emitted cues and numbers them from 1."""

    def __init__(self, min_duration_ms: int) -> None:
        self.min_duration_ms = min_duration_ms
        self.cues: list[Cue] = []

    def emit(self, start_ms: int, end_ms: int, source: DialogueInterval, text: str) -> None:
        if end_ms - start_ms <= self.min_duration_ms:
            logger.debug(
                "Dropping %d ms cue at %d ms (minimum is %d ms)",
                end_ms - start_ms, start_ms, self.min_duration_ms,
            )
            return
        self.cues.append(
            Cue(
                index=len(self.cues) + 1,
                start_ms=start_ms,
                end_ms=end_ms,
                text=text,
                voice_style_id=source.style_name or None,
                inline_style_css=source.inline_style_css,
            )
        )

    def flush(self, interval: DialogueInterval) -> None:
        self.emit(interval.start_ms, interval.end_ms, interval, interval.text)


def _split(
    current: DialogueInterval,
    following: DialogueInterval,
    sink: _CueSink,
) -> DialogueInterval:
    """Emit the cues for two partially overlapping intervals, return the remainder."""
    shared_start = max(current.start_ms, following.start_ms)
    # A remainder accumulator may already start after *following* ends; never step back.
    shared_end = max(min(current.end_ms, following.end_ms), shared_start)

    # Part shown before the second line appears.
    sink.emit(current.start_ms, following.start_ms, current, current.text)
    # Both lines on screen.
    sink.emit(shared_start, shared_end, current, current.text + LINE_BREAK + following.text)

    # What is left belongs to whichever line ends later.
    if following.end_ms >= current.end_ms:
        return replace(following, start_ms=shared_end, start_str=format_ass_time(shared_end))
    return replace(current, start_ms=shared_end, start_str=format_ass_time(shared_end))


def reconcile(
    intervals: Iterable[DialogueInterval],
    min_duration_ms: int = DEFAULT_MIN_DURATION_MS,
) -> list[Cue]:
    """Resolve overlapping intervals into ordered, non-overlapping cues.

    Parameters
    ----------
    intervals:
        Parsed dialogue intervals in any order. They are not modified.
    min_duration_ms:
        Cues lasting this long or shorter are dropped.

    Returns
    -------
    list[Cue]
        Cues numbered 1..n in start order, each ending no later than the
        next one starts.
    """
    # sorted() is stable: equal start times keep document order.
    ordered = sorted(intervals, key=lambda interval: interval.start_ms)
    sink = _CueSink(min_duration_ms)
    if not ordered:
        return sink.cues

    current = ordered[0]
    for following in ordered[1:]:
        if current.end_ms >= following.start_ms:
            if current.text == following.text:
                if following.end_ms > current.end_ms:
                    current = replace(current, end_ms=following.end_ms, end_str=following.end_str)
                continue
            if current.end_ms > following.start_ms:
                current = _split(current, following, sink)
                continue

        sink.flush(current)
        current = following

    sink.flush(current)
    return sink.cues
