"""Inline ASS override-code handling for dialogue text.

Override blocks are ``{...}`` groups of backslash codes, e.g. ``{\\b1\\fs20}``.
Depending on the options they are translated (leading style block -> per-cue
CSS, ``\\b``/``\\i``/``\\u`` toggles -> ``<b>``/``<i>``/``<u>``) and then
stripped, together with vector drawings (``{\\p1}m 0 0 l ...{\\p0}``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from subconvert.ass.styles import translate_style
from subconvert.models import TargetFormat
from subconvert.options import ConversionOptions

_BLOCK_RE = re.compile(r"\{[^}]*\}")
# Exactly one override block, at the start, followed by block-free text.
_SINGLE_LEADING_BLOCK_RE = re.compile(r"\{([^{]*?)\}([^{]+)")
_TOGGLE_RE = re.compile(r"([biu])(\d*)")
_DRAWING_RE = re.compile(r"p(\d+)")

# Longest names first so "bord" is not read as "b" with value "ord".
INLINE_CODE_NAMES: tuple[str, ...] = (
    "iclip", "xbord", "ybord", "yshad", "xshad", "shad", "clip", "blur", "bord",
    "move", "pos", "fax", "fay", "frx", "fry", "frz", "fsp", "fscx", "fscy",
    "fs", "fn", "fe", "be", "1c", "2c", "3c", "4c", "c", "i", "b", "u", "s",
)

MARKUP_TAGS: tuple[str, ...] = ("b", "i", "u")


@dataclass(frozen=True)
class ProcessedText:
    text: Optional[str]     # None when nothing visible is left
    inline_css: str = ""


def _codes(block: str) -> list[str]:
    """Return the backslash codes of ``{...}`` *block*, without the backslashes."""
    inner = block[1:-1]
    # Anything before the first backslash is a comment, not a code.
    return [code.strip() for code in inner.split("\\")[1:] if code.strip()]


def match_inline_code(code: str) -> Optional[tuple[str, str]]:
    """Split ``"bord2.5"`` into ``("bord", "2.5")``; None for unrecognized codes."""
    for name in INLINE_CODE_NAMES:
        if code.startswith(name):
            return name, code[len(name):]
    return None


def leading_block_css(
    text: str,
    video_height: float,
    force_contrast_outline: bool = True,
) -> str:
    """CSS for a line styled by a single leading override block, else ``""``."""
    match = _SINGLE_LEADING_BLOCK_RE.fullmatch(text)
    if match is None:
        return ""
    names: list[str] = []
    values: list[str] = []
    for code in _codes("{" + match.group(1) + "}"):
        matched = match_inline_code(code)
        if matched is not None:
            names.append(matched[0])
            values.append(matched[1])
    return translate_style(
        values, names, video_height,
        header=False, force_contrast_outline=force_contrast_outline,
    )


def _toggle_state(block: str, tag: str) -> Optional[bool]:
    """True/False if *block* switches *tag* on/off, None if it does not touch it."""
    state = None
    for code in _codes(block):
        match = _TOGGLE_RE.fullmatch(code)
        if match is None or match.group(1) != tag:
            continue
        value = match.group(2)
        state = bool(value) and int(value) != 0
    return state


def codes_to_tags(text: str) -> str:
    """Wrap spans toggled by ``\\b``, ``\\i`` and ``\\u`` codes in markup tags.

    The override blocks themselves are kept, right after the tags, so later
    stripping still sees them. Tags left open at the end of the line are
    closed in reverse order of opening.
    """
    pieces: list[str] = []
    open_tags: list[str] = []
    position = 0
    for match in _BLOCK_RE.finditer(text):
        pieces.append(text[position:match.start()])
        block = match.group(0)
        toggles = {tag: _toggle_state(block, tag) for tag in MARKUP_TAGS}
        # Innermost first, so tags closed by the same block stay nested.
        closing = [tag for tag in reversed(open_tags) if toggles[tag] is False]
        after = [f"</{tag}>" for tag in closing]
        open_tags = [tag for tag in open_tags if tag not in closing]
        before: list[str] = []
        for tag in MARKUP_TAGS:
            if toggles[tag] is True and tag not in open_tags:
                before.append(f"<{tag}>")
                open_tags.append(tag)
        pieces.extend(after)
        pieces.extend(before)
        pieces.append(block)
        position = match.end()
    pieces.append(text[position:])
    pieces.extend(f"</{tag}>" for tag in reversed(open_tags))
    return "".join(pieces)


def _drawing_mode(block: str) -> Optional[int]:
    mode = None
    for code in _codes(block):
        match = _DRAWING_RE.fullmatch(code)
        if match is not None:
            mode = int(match.group(1))
    return mode


def strip_drawings(text: str) -> str:
    """Remove ``{\\pN}...{\\p0}`` drawings, and an unterminated ``{\\pN}...`` tail."""
    pieces: list[str] = []
    position = 0
    drawing = False
    for match in _BLOCK_RE.finditer(text):
        mode = _drawing_mode(match.group(0))
        if not drawing:
            if mode:
                pieces.append(text[position:match.start()])
                drawing = True
        elif mode == 0:
            drawing = False
            position = match.end()
    if not drawing:
        pieces.append(text[position:])
    return "".join(pieces)


def strip_blocks(text: str) -> str:
    return _BLOCK_RE.sub("", text)


def replace_escapes(text: str) -> str:
    """``\\h`` -> no-break space, ``\\n`` -> space, ``\\N`` -> CRLF."""
    return text.replace("\\h", "\xa0").replace("\\n", " ").replace("\\N", "\r\n")


def process_dialogue_text(
    text: str,
    target_format: TargetFormat | str,
    video_height: float,
    options: ConversionOptions,
) -> ProcessedText:
    """Run one Dialogue ``Text`` field through the override-code pipeline."""
    text = text.strip()
    inline_css = ""

    if options.strip_control_codes:
        if TargetFormat(target_format) is TargetFormat.VTT and text.startswith("{"):
            inline_css = leading_block_css(text, video_height, options.force_contrast_outline)
        # Drawings first: toggles inside a drawing never reach the tag pass.
        text = strip_drawings(text)
        if options.convert_codes_to_tags:
            text = codes_to_tags(text)
        text = strip_blocks(text)

    text = replace_escapes(text)

    if not text.strip():
        return ProcessedText(None)
    return ProcessedText(text, inline_css)
