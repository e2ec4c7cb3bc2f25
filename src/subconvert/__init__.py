"""subconvert: ASS/SSA -> SRT/WebVTT conversion with overlap reconciliation."""

from subconvert.convert import convert_ass, convert_srt_to_vtt, convert_text, convert_vtt_to_srt
from subconvert.models import Cue, DialogueInterval, TargetFormat
from subconvert.options import ConversionOptions

__version__ = "0.1.0"

__all__ = [
    "ConversionOptions",
    "Cue",
    "DialogueInterval",
    "TargetFormat",
    "convert_ass",
    "convert_srt_to_vtt",
    "convert_text",
    "convert_vtt_to_srt",
]
