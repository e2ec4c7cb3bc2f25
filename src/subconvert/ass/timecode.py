"""ASS timestamp parsing and SRT/VTT timestamp rendering."""

from __future__ import annotations

import re

from subconvert.errors import MalformedTimestampError
from subconvert.models import TargetFormat

# H:MM:SS.CC; the fraction is normally two digits (centiseconds).
_ASS_TIME_RE = re.compile(r"(\d+):(\d{1,2}):(\d{1,2})\.(\d{1,3})")


def parse_time_to_ms(time: str) -> int:
    """Convert an ASS ``H:MM:SS.CC`` timestamp to milliseconds.

    The fraction is read as a decimal fraction of a second, so the usual
    two-digit centisecond field contributes ``CC * 10`` milliseconds.

    Raises
    ------
    MalformedTimestampError
        If *time* is not a numeric ``H:MM:SS.CC`` value.
    """
    match = _ASS_TIME_RE.fullmatch(time.strip())
    if match is None:
        raise MalformedTimestampError(time)
    hours, minutes, seconds, fraction = match.groups()
    return (
        int(hours) * 3_600_000
        + int(minutes) * 60_000
        + int(seconds) * 1000
        + int(fraction.ljust(3, "0"))
    )


def format_ms(ms: int, target_format: TargetFormat | str) -> str:
    """Render *ms* as ``HH:MM:SS,mmm`` (SRT) or ``HH:MM:SS.mmm`` (VTT)."""
    separator = "." if TargetFormat(target_format) is TargetFormat.VTT else ","
    ms = max(ms, 0)
    hours, rest = divmod(ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}{separator}{millis:03d}"


def format_time(time: str | int, target_format: TargetFormat | str) -> str:
    """Re-render an ASS timestamp (or a millisecond value) for *target_format*."""
    if isinstance(time, str):
        time = parse_time_to_ms(time)
    return format_ms(time, target_format)


def format_ass_time(ms: int) -> str:
    """Render *ms* back as an ASS ``H:MM:SS.CC`` timestamp (centisecond precision)."""
    hours, rest = divmod(max(ms, 0), 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"{hours}:{minutes:02d}:{seconds:02d}.{millis // 10:02d}"
