"""Conversion entry points.

``convert_ass`` runs the full ASS pipeline (parse -> reconcile -> emit).
SRT <-> VTT conversions carry no timeline or style reconciliation and are
delegated to pysubs2.
"""

from __future__ import annotations

import logging
from typing import Optional

import pysubs2
from pysubs2.exceptions import Pysubs2Error

from subconvert.ass.parser import parse_ass
from subconvert.emit import render
from subconvert.errors import PassthroughError, UnsupportedConversionError
from subconvert.models import TargetFormat
from subconvert.options import ConversionOptions
from subconvert.timeline import reconcile

logger = logging.getLogger(__name__)

SOURCE_FORMATS: tuple[str, ...] = ("ass", "ssa", "srt", "vtt")


def convert_ass(
    source_text: str,
    target_format: TargetFormat | str = TargetFormat.SRT,
    options: Optional[ConversionOptions] = None,
) -> str:
    """Convert an ASS/SSA document to SRT or WebVTT text.

    Parameters
    ----------
    source_text:
        Full ASS/SSA document.
    target_format:
        ``"srt"`` or ``"vtt"``.
    options:
        Conversion options; defaults apply when omitted.

    Returns
    -------
    str
        The converted document with CRLF line endings.

    Raises
    ------
    SubConvertError
        Structural problems (missing ``Format:`` line, malformed times or rows).
    """
    target = TargetFormat(target_format)
    options = options or ConversionOptions()

    document = parse_ass(source_text, target, options)
    cues = reconcile(document.intervals, options.min_duration_ms)
    if not cues:
        logger.warning("No dialogue survived conversion; writing an empty %s document", target.value.upper())
    logger.info(
        "Converted %d dialogue lines into %d %s cues",
        len(document.intervals), len(cues), target.value.upper(),
    )
    return render(cues, document, target)


def _passthrough(text: str, source_format: str, target_format: str) -> str:
    try:
        subs = pysubs2.SSAFile.from_string(text, format_=source_format)
    except (Pysubs2Error, ValueError) as exc:
        raise PassthroughError(source_format, str(exc)) from exc
    return subs.to_string(target_format)


def convert_srt_to_vtt(text: str) -> str:
    """Re-emit SRT subtitles as WebVTT, cue for cue."""
    return _passthrough(text, "srt", "vtt")


def convert_vtt_to_srt(text: str) -> str:
    """Re-emit WebVTT subtitles as SRT, cue for cue."""
    return _passthrough(text, "vtt", "srt")


def convert_text(
    text: str,
    source_format: str,
    target_format: TargetFormat | str,
    options: Optional[ConversionOptions] = None,
) -> str:
    """Dispatch *text* to the converter for ``source_format -> target_format``.

    Raises ``UnsupportedConversionError`` for pairs other than ass/ssa -> srt|vtt,
    srt -> vtt and vtt -> srt.
    """
    source = source_format.lower().lstrip(".")
    target = str(getattr(target_format, "value", target_format)).lower().lstrip(".")

    if source in ("ass", "ssa") and target in ("srt", "vtt"):
        return convert_ass(text, target, options)
    if source == "srt" and target == "vtt":
        return convert_srt_to_vtt(text)
    if source == "vtt" and target == "srt":
        return convert_vtt_to_srt(text)
    raise UnsupportedConversionError(source, target)
