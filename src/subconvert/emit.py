"""Render reconciled cues as SRT or WebVTT text (CRLF line endings)."""

from __future__ import annotations

from typing import Sequence

from subconvert.ass.timecode import format_ms
from subconvert.models import Cue, ParsedDocument, TargetFormat

CRLF = "\r\n"

# Base ::cue rule written ahead of the per-voice rules.
DEFAULT_CUE_STYLE = (
    "::cue{color: white;\r\n"
    "background-color: transparent;\r\n"
    "font-size: 20px;\r\n"
    "white-space: normal;\r\n"
    "text-shadow: 0 0 1px black, 1px 1px 0 black;\r\n"
    "}\r\n"
)


def _finish(blocks: list[str]) -> str:
    return "".join(blocks).strip() + CRLF


def render_srt(cues: Sequence[Cue]) -> str:
    blocks = []
    for cue in cues:
        blocks.append(
            f"{cue.index}{CRLF}"
            f"{format_ms(cue.start_ms, TargetFormat.SRT)} --> {format_ms(cue.end_ms, TargetFormat.SRT)}{CRLF}"
            f"{cue.text}{CRLF}{CRLF}"
        )
    return _finish(blocks)


def cue_style_rules(cues: Sequence[Cue]) -> str:
    """``::cue(#x<n>)`` rules for cues that carry a leading-override style."""
    return "".join(
        f"::cue(#{cue.cue_id}) {{{CRLF}{cue.inline_style_css}"
        for cue in cues
        if cue.inline_style_css
    )


def render_vtt(cues: Sequence[Cue], document: ParsedDocument) -> str:
    blocks = [f"WEBVTT{CRLF}{CRLF}"]

    if document.has_script_info:
        blocks.append(f"NOTE - metadata{CRLF}{document.metadata}{CRLF}{CRLF}")

    extended = cue_style_rules(cues)
    if document.has_styles or extended:
        blocks.append(f"STYLE{CRLF}{DEFAULT_CUE_STYLE}{document.header_css}{extended}{CRLF}{CRLF}")

    for cue in cues:
        voice = f"<v {cue.voice_style_id}>" if cue.voice_style_id else ""
        blocks.append(
            f"{cue.cue_id}{CRLF}"
            f"{format_ms(cue.start_ms, TargetFormat.VTT)} --> {format_ms(cue.end_ms, TargetFormat.VTT)} line:90%{CRLF}"
            f"{voice}{cue.text}{CRLF}{CRLF}"
        )
    return _finish(blocks)


def render(cues: Sequence[Cue], document: ParsedDocument, target_format: TargetFormat | str) -> str:
    if TargetFormat(target_format) is TargetFormat.VTT:
        return render_vtt(cues, document)
    return render_srt(cues)
