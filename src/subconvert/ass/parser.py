"""Section-by-section scanner for ASS/SSA documents.

Reads ``[Script Info]`` (metadata and ``PlayResY``) and the styles section
only when the target is WebVTT, since SRT has nowhere to put them. The
``[Events]`` section is always read; parsing stops at the first section
header that follows it.

Column positions come from each section's ``Format:`` line, never from a
fixed layout, so reordered columns are handled.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from subconvert.ass.overrides import process_dialogue_text
from subconvert.ass.styles import DEFAULT_VIDEO_HEIGHT, translate_style
from subconvert.ass.timecode import parse_time_to_ms
from subconvert.errors import (
    MalformedEventError,
    MalformedTimestampError,
    MissingFormatHeaderError,
)
from subconvert.models import DialogueInterval, ParsedDocument, TargetFormat
from subconvert.options import ConversionOptions

logger = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"^\[.*\]$")
_LINE_SPLIT_RE = re.compile(r"\r?\n")

SCRIPT_INFO = "[script info]"
EVENTS = "[events]"

_REQUIRED_EVENT_COLUMNS = ("Start", "End", "Text")


def parse_format_line(line: str) -> dict[str, int]:
    """Map column names of a ``Format:`` line to their positions."""
    positions: dict[str, int] = {}
    for index, name in enumerate(line[len("Format:"):].replace(" ", "").split(",")):
        positions.setdefault(name, index)
    return positions


def _is_styles_section(section: str) -> bool:
    # [V4 Styles] (SSA) and [V4+ Styles] (ASS)
    return section.endswith("styles]")


class _AssScanner:
    """One parse of one document. Not reused across documents."""

    def __init__(self, target_format: TargetFormat, options: ConversionOptions) -> None:
        self.target_format = target_format
        self.options = options
        self.document = ParsedDocument(video_height=DEFAULT_VIDEO_HEIGHT)
        self.section = ""
        self.style_columns: Optional[list[str]] = None
        self.event_columns: Optional[dict[str, int]] = None
        self._metadata: list[str] = []
        self._header_css: list[str] = []

    @property
    def wants_headers(self) -> bool:
        return self.target_format is TargetFormat.VTT

    def run(self, source_text: str) -> ParsedDocument:
        for line_no, raw in enumerate(_LINE_SPLIT_RE.split(source_text), start=1):
            line = raw.strip().lstrip("\ufeff")
            if not line:
                continue

            if _SECTION_RE.match(line):
                if self.section == EVENTS:
                    logger.debug("Stopping at %s (line %d): events section finished", line, line_no)
                    break
                self.section = line.lower()
                logger.debug("Entering section %s (line %d)", line, line_no)
                if self.section == SCRIPT_INFO:
                    self.document.has_script_info = self.wants_headers
                elif _is_styles_section(self.section):
                    self.document.has_styles = self.wants_headers
                elif self.section != EVENTS:
                    logger.debug("Skipping unrecognized section %s", line)
                continue

            if self.section == EVENTS:
                self._event_line(line, line_no)
            elif not self.wants_headers:
                continue
            elif self.section == SCRIPT_INFO:
                self._script_info_line(line)
            elif _is_styles_section(self.section):
                self._style_line(line, line_no)

        self.document.metadata = "".join(self._metadata)
        self.document.header_css = "".join(self._header_css)
        return self.document

    def _script_info_line(self, line: str) -> None:
        if line.startswith("PlayResY"):
            height = line.split(":", 1)[-1].strip()
            try:
                self.document.video_height = float(height)
            except ValueError:
                logger.warning("Ignoring non-numeric PlayResY %r", height)
        self._metadata.append(line + "\r\n")

    def _style_line(self, line: str, line_no: int) -> None:
        if self.style_columns is None and line.startswith("Format:"):
            self.style_columns = line[len("Format:"):].replace(" ", "").split(",")
            return
        if not line.startswith("Style:"):
            return
        if self.style_columns is None:
            raise MissingFormatHeaderError(
                self.section, line_no, "Style row appears before the styles Format line"
            )
        values = line[len("Style:"):].split(",")
        self._header_css.append(
            translate_style(
                values,
                self.style_columns,
                self.document.video_height,
                header=True,
                force_contrast_outline=self.options.force_contrast_outline,
            )
        )

    def _event_line(self, line: str, line_no: int) -> None:
        if self.event_columns is None and line.startswith("Format:"):
            columns = parse_format_line(line)
            missing = [name for name in _REQUIRED_EVENT_COLUMNS if name not in columns]
            if missing:
                raise MissingFormatHeaderError(
                    self.section, line_no, f"Format line lacks column(s): {', '.join(missing)}"
                )
            self.event_columns = columns
            return
        if not line.startswith("Dialogue:"):
            return
        if self.event_columns is None:
            raise MissingFormatHeaderError(
                self.section, line_no, "Dialogue row appears before the events Format line"
            )

        interval = self._dialogue(line, line_no)
        if interval is not None:
            self.document.intervals.append(interval)

    def _dialogue(self, line: str, line_no: int) -> Optional[DialogueInterval]:
        columns = self.event_columns
        parts = line[len("Dialogue:"):].lstrip().split(",")
        text_index = columns["Text"]
        if len(parts) <= max(columns["Start"], columns["End"], text_index):
            raise MalformedEventError(
                line_no, f"expected at least {text_index + 1} fields, found {len(parts)}"
            )

        start_str = parts[columns["Start"]].strip()
        end_str = parts[columns["End"]].strip()
        try:
            start_ms = parse_time_to_ms(start_str)
            end_ms = parse_time_to_ms(end_str)
        except MalformedTimestampError as exc:
            raise exc.with_line(line_no) from exc

        style_index = columns.get("Style")
        style_name = ""
        if style_index is not None and style_index < len(parts):
            style_name = parts[style_index].strip()

        # Free text may itself contain commas.
        processed = process_dialogue_text(
            ",".join(parts[text_index:]),
            self.target_format,
            self.document.video_height,
            self.options,
        )
        if processed.text is None:
            logger.debug("Line %d has no visible text after stripping codes; skipped", line_no)
            return None

        return DialogueInterval(
            start_ms=start_ms,
            end_ms=end_ms,
            start_str=start_str,
            end_str=end_str,
            text=processed.text,
            style_name=style_name,
            inline_style_css=processed.inline_css,
        )


def parse_ass(
    source_text: str,
    target_format: TargetFormat | str = TargetFormat.SRT,
    options: Optional[ConversionOptions] = None,
) -> ParsedDocument:
    """Parse an ASS/SSA document into dialogue intervals and VTT header data.

    Raises
    ------
    MissingFormatHeaderError
        A ``Style:``/``Dialogue:`` row precedes its section's ``Format:``
        line, or the events format lacks ``Start``/``End``/``Text``.
    MalformedEventError
        A ``Dialogue:`` row has fewer fields than its format requires.
    MalformedTimestampError
        A start or end field is not a valid ASS time.
    """
    scanner = _AssScanner(TargetFormat(target_format), options or ConversionOptions())
    return scanner.run(source_text)
