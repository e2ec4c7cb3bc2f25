"""Typed errors raised by subconvert; messages are meant to be shown to users as-is."""

from pathlib import Path
from typing import Optional


def _at_line(line_no: Optional[int]) -> str:
    return f" (line {line_no})" if line_no is not None else ""


class SubConvertError(Exception):
    """Base class for all subconvert errors."""


class MalformedTimestampError(SubConvertError):
    def __init__(self, value: str, line_no: Optional[int] = None) -> None:
        super().__init__(
            f"Malformed ASS timestamp '{value}'{_at_line(line_no)}.\n"
            f"  Cause: expected H:MM:SS.CC with numeric fields\n"
            f"  Check: Is the Start/End column of the Events Format line pointing at the time fields?"
        )
        self.value = value
        self.line_no = line_no

    def with_line(self, line_no: int) -> "MalformedTimestampError":
        return MalformedTimestampError(self.value, line_no)


class MissingFormatHeaderError(SubConvertError):
    def __init__(self, section: str, line_no: int, detail: str) -> None:
        super().__init__(
            f"Cannot resolve columns in section {section}{_at_line(line_no)}.\n"
            f"  Cause: {detail}\n"
            f"  Check: Does the section declare a 'Format:' line before its data rows?"
        )
        self.section = section
        self.line_no = line_no
        self.detail = detail


class MalformedEventError(SubConvertError):
    def __init__(self, line_no: int, detail: str) -> None:
        super().__init__(
            f"Malformed Dialogue line{_at_line(line_no)}.\n"
            f"  Cause: {detail}\n"
            f"  Check: Does the row have as many comma-separated fields as the Events Format line?"
        )
        self.line_no = line_no
        self.detail = detail


class UnsupportedConversionError(SubConvertError):
    def __init__(self, source_format: str, target_format: str) -> None:
        super().__init__(
            f"Conversion from '{source_format}' to '{target_format}' is not supported.\n"
            f"  Supported: ass -> srt, ass -> vtt, srt -> vtt, vtt -> srt"
        )
        self.source_format = source_format
        self.target_format = target_format


class PassthroughError(SubConvertError):
    def __init__(self, source_format: str, detail: str) -> None:
        super().__init__(
            f"Cannot read {source_format.upper()} subtitles.\n"
            f"  Cause: {detail}\n"
            f"  Check: Is the input valid {source_format.upper()}?"
        )
        self.source_format = source_format
        self.detail = detail


class SubtitleReadError(SubConvertError):
    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(
            f"Cannot read subtitle file '{path.name}'.\n"
            f"  Cause: {detail}\n"
            f"  Tip: Try re-saving the file as UTF-8 in a text editor."
        )
        self.path = path
        self.detail = detail
