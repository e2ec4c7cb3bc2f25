"""Records passed between the parser, the reconciler and the emitters."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TargetFormat(str, Enum):
    """Output subtitle format.

    str, Enum lets callers pass plain "srt" / "vtt" strings where a format is expected.
    """
    SRT = "srt"
    VTT = "vtt"


@dataclass(frozen=True)
class DialogueInterval:
    """One parsed ASS Dialogue line after inline-code processing."""

    start_ms: int
    end_ms: int
    start_str: str          # ASS source timestamp, e.g. "0:00:01.00"
    end_str: str
    text: str               # Converted text (tags, CRLF line breaks)
    style_name: str = ""    # Events "Style" column, used as the VTT voice
    inline_style_css: str = ""  # Block body from a leading override block (VTT only)

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


@dataclass(frozen=True)
class Cue:
    """A single emitted SRT/VTT block."""

    index: int
    start_ms: int
    end_ms: int
    text: str
    voice_style_id: Optional[str] = None
    inline_style_css: str = ""

    @property
    def cue_id(self) -> str:
        """WebVTT cue identifier, also the ``::cue(#...)`` selector target."""
        return f"x{self.index}"


@dataclass
class ParsedDocument:
    """Everything the emitter needs from one ASS parse."""

    intervals: list[DialogueInterval] = field(default_factory=list)
    metadata: str = ""          # Raw [Script Info] lines, CRLF-terminated
    header_css: str = ""        # Per-voice ::cue rules from the styles section
    has_script_info: bool = False
    has_styles: bool = False
    video_height: float = 1080
