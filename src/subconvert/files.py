"""File discovery, reading and writing around the in-memory converters.

Input that is not valid UTF-8 is decoded with the encoding detected by
charset-normalizer; if detection also fails, ``SubtitleReadError`` is raised
rather than guessing.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from charset_normalizer import from_bytes

from subconvert.convert import convert_text
from subconvert.errors import SubtitleReadError
from subconvert.models import TargetFormat
from subconvert.options import ConversionOptions

logger = logging.getLogger(__name__)

# SRT and VTT inputs always convert to the other format.
PASSTHROUGH_TARGETS: dict[str, TargetFormat] = {
    "srt": TargetFormat.VTT,
    "vtt": TargetFormat.SRT,
}


def resolve_target(source_format: str, requested: TargetFormat | str) -> TargetFormat:
    """Target format for *source_format*: the request for ASS, the fixed pair otherwise."""
    return PASSTHROUGH_TARGETS.get(source_format.lower(), TargetFormat(requested))


def read_subtitle_text(path: Path) -> str:
    """Read *path* as UTF-8 (BOM tolerated), falling back to charset-normalizer."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SubtitleReadError(path, str(exc)) from exc

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    # Not UTF-8: let charset-normalizer pick
    best = from_bytes(raw).best()
    if best is None:
        raise SubtitleReadError(path, "Could not determine file encoding. Re-save as UTF-8.")
    logger.warning("'%s' is not UTF-8; decoding as %s", path.name, best.encoding)
    return str(best)


def discover_inputs(input_dir: Path, source_format: str) -> list[Path]:
    """Files in *input_dir* (not recursive) with the ``.<source_format>`` extension."""
    suffix = f".{source_format.lower()}"
    return sorted(p for p in input_dir.iterdir() if p.is_file() and p.suffix.lower() == suffix)


def convert_file(
    source: Path,
    output_dir: Path,
    source_format: str,
    target_format: TargetFormat | str,
    options: Optional[ConversionOptions] = None,
) -> Path:
    """Convert one file into ``output_dir/<stem>.<target>`` and return the written path."""
    target = resolve_target(source_format, target_format)
    text = read_subtitle_text(source)
    converted = convert_text(text, source_format, target, options)

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{source.stem}.{target.value}"
    # newline="" keeps the converter's CRLF line endings as-is.
    with output_path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(converted)
    logger.debug("Wrote %s", output_path)
    return output_path
