"""Translate ASS style attributes into WebVTT ``::cue`` CSS.

The same field table serves both vocabularies: long names from a
``[V4+ Styles]`` row (``Fontname``, ``PrimaryColour``, ...) and the short
override-code names found inline in dialogue (``fn``, ``1c``, ``bord``, ...).
Border, shadow and blur values are collected during the pass and resolved
once at the end, because CSS expresses them together as ``text-shadow`` or
``background-color``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from subconvert.ass.color import abgr_to_rgba, is_light

CRLF = "\r\n"
DEFAULT_VIDEO_HEIGHT = 1080
# ASS font size that maps to 1em.
_BASE_FONT_SIZE = 20


@dataclass
class BorderSettings:
    back_color: Optional[str] = None
    outline_color: Optional[str] = None
    style: Optional[str] = None
    outline: Optional[float] = None
    shadow: Optional[float] = None
    blur: Optional[float] = None


@dataclass
class _StyleState:
    video_height: float
    selector: str = ""
    declarations: list[str] = field(default_factory=list)
    border: BorderSettings = field(default_factory=BorderSettings)
    text_color: Optional[str] = None
    underline: bool = False
    line_through: bool = False

    def add(self, declaration: str) -> None:
        self.declarations.append(declaration)


def _to_number(value: str) -> Optional[float]:
    try:
        return float(value)
    except ValueError:
        return None


def _round2(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def _fmt_number(value: float) -> str:
    """Render 2.0 as "2" and 1.25 as "1.25"."""
    if value == int(value):
        return str(int(value))
    return repr(value)


def _is_on(value: str) -> bool:
    number = _to_number(value)
    return number is not None and abs(number) == 1


def _css_color(value: str) -> str:
    return f"#{abgr_to_rgba(value)}"


# ---------------------------------------------------------------------------
# Field handlers
# ---------------------------------------------------------------------------

def _name(state: _StyleState, value: str) -> None:
    state.selector = f'::cue(v[voice="{value}"]) {{'


def _font_name(state: _StyleState, value: str) -> None:
    state.add(f'font-family: "{value}";')


def _font_size(state: _StyleState, value: str) -> None:
    size = _to_number(value)
    if size is None or size <= 0:
        return
    em = _fmt_number(_round2(size / _BASE_FONT_SIZE))
    vmin = _fmt_number(_round2(state.video_height / size))
    state.add(f"font-size: {em}em;")
    state.add(f"font-size: clamp(14px, {em}em, {vmin}vmin);")


def _primary_color(state: _StyleState, value: str) -> None:
    state.text_color = _css_color(value)
    state.add(f"color: {state.text_color};")


def _outline_color(state: _StyleState, value: str) -> None:
    state.border.outline_color = _css_color(value)


def _back_color(state: _StyleState, value: str) -> None:
    state.border.back_color = _css_color(value)


def _bold(state: _StyleState, value: str) -> None:
    weight = abs(_to_number(value) or 0)
    if weight == 1:
        state.add("font-weight: bold;")
    elif weight > 1:
        state.add(f"font-weight: {_fmt_number(weight)};")
    else:
        state.add("font-weight: normal;")


def _italic(state: _StyleState, value: str) -> None:
    state.add("font-style: italic;" if _is_on(value) else "font-style: normal;")


def _underline(state: _StyleState, value: str) -> None:
    on = _is_on(value)
    if state.line_through:
        if on:
            state.add("text-decoration: underline line-through;")
            state.underline = True
        return
    state.add("text-decoration: underline;" if on else "text-decoration: none;")
    state.underline = on


def _strikeout(state: _StyleState, value: str) -> None:
    on = _is_on(value)
    if state.underline:
        if on:
            state.add("text-decoration: underline line-through;")
            state.line_through = True
        return
    state.add("text-decoration: line-through;" if on else "text-decoration: none;")
    state.line_through = on


def _spacing(state: _StyleState, value: str) -> None:
    state.add(f"letter-spacing: {value}px;")


def _border_style(state: _StyleState, value: str) -> None:
    state.border.style = value


def _outline(state: _StyleState, value: str) -> None:
    state.border.outline = _to_number(value)


def _shadow(state: _StyleState, value: str) -> None:
    state.border.shadow = _to_number(value)


def _blur(state: _StyleState, value: str) -> None:
    state.border.blur = _to_number(value)


def _margin(prop: str) -> Callable[[_StyleState, str], None]:
    def handler(state: _StyleState, value: str) -> None:
        state.add(f"{prop}: {value}px;")
    return handler


def _unsupported(state: _StyleState, value: str) -> None:
    """No CSS equivalent inside a cue."""


_FIELD_HANDLERS: dict[str, Callable[[_StyleState, str], None]] = {
    "Name": _name,
    "Fontname": _font_name, "fn": _font_name,
    "Fontsize": _font_size, "fs": _font_size,
    "PrimaryColour": _primary_color, "PrimaryColor": _primary_color,
    "c": _primary_color, "1c": _primary_color,
    "OutlineColour": _outline_color, "OutlineColor": _outline_color, "3c": _outline_color,
    # SSA [V4 Styles] name for the outline colour.
    "TertiaryColour": _outline_color, "TertiaryColor": _outline_color,
    "BackColour": _back_color, "BackColor": _back_color, "4c": _back_color,
    "Bold": _bold, "b": _bold,
    "Italic": _italic, "i": _italic,
    "Underline": _underline, "u": _underline,
    "StrikeOut": _strikeout, "Strikeout": _strikeout, "s": _strikeout,
    "Spacing": _spacing, "fsp": _spacing,
    "BorderStyle": _border_style,
    "Outline": _outline, "bord": _outline,
    "Shadow": _shadow, "shad": _shadow,
    "blur": _blur, "be": _blur,
    "MarginL": _margin("margin-left"),
    "MarginR": _margin("margin-right"),
    "MarginV": _margin("margin-bottom"),
    "Alignment": _unsupported,
    "SecondaryColour": _unsupported, "SecondaryColor": _unsupported, "2c": _unsupported,
    "ScaleX": _unsupported, "ScaleY": _unsupported,
    "Angle": _unsupported,
    "AlphaLevel": _unsupported,
    "Encoding": _unsupported,
}


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def _contrast_layers(text_color: str) -> list[str]:
    edge = "black" if is_light(text_color) else "white"
    return [f"0 0 1px {edge}", f"1px 1px 0 {edge}"]


def _resolve_border(state: _StyleState, header: bool, force_contrast_outline: bool) -> None:
    border = state.border

    if border.style == "1" or not header:
        layers: list[str] = []
        if _positive(border.outline) and border.outline_color is not None:
            layers.append(f"0 0 1px {border.outline_color}")
        if _positive(border.shadow) and border.back_color is not None:
            layers.append(f"1px 1px 0 {border.back_color}")
        if _positive(border.blur) and (border.outline_color is not None or not header):
            if border.outline_color is not None:
                layers.append(f"0 0 5px {border.outline_color}")
            else:
                layers.append("0 0 5px")

        if layers:
            if not force_contrast_outline:
                state.add(f"text-shadow: {', '.join(layers)};")
            elif state.text_color is not None:
                layers = _contrast_layers(state.text_color) + layers
                state.add(f"text-shadow: {', '.join(layers)};")
        state.add("background-color: transparent;")

    elif border.style == "3":
        # Opaque box: the outline colour fills the box, the shadow colour is a fallback.
        fill = None
        if _positive(border.outline):
            fill = border.outline_color or border.back_color
        elif _positive(border.shadow):
            fill = border.back_color or border.outline_color
        if fill is not None:
            state.add(f"background-color: {fill};")

    elif header:
        state.add("background-color: transparent;")
        if force_contrast_outline and state.text_color is not None:
            state.add(f"text-shadow: {', '.join(_contrast_layers(state.text_color))};")


def translate_style(
    values: Sequence[str],
    fields: Sequence[str],
    video_height: float = DEFAULT_VIDEO_HEIGHT,
    header: bool = True,
    force_contrast_outline: bool = True,
) -> str:
    """Build a CSS block from parallel *values* / *fields* lists.

    Parameters
    ----------
    values:
        Raw values, e.g. one ``Style:`` row split on commas or the values
        of matched override codes.
    fields:
        Field identifiers aligned with *values*. Unknown identifiers are ignored.
    video_height:
        ``PlayResY`` of the script, used for the responsive font-size clamp.
    header:
        True for a style-section row, False for inline override codes. Inline
        codes always resolve border/shadow layers; header rows only do so for
        ``BorderStyle`` 1 and fall back to a transparent background otherwise.
    force_contrast_outline:
        Prepend a black/white outline chosen against the text colour.

    Returns
    -------
    str
        The block (selector line for header rows with a ``Name``, one
        declaration per CRLF-terminated line, closing ``}``) or ``""``.
    """
    state = _StyleState(video_height=video_height)
    for field_name, raw in zip(fields, values):
        handler = _FIELD_HANDLERS.get(field_name.strip())
        if handler is not None:
            handler(state, raw.strip())

    _resolve_border(state, header, force_contrast_outline)

    lines = ([state.selector] if state.selector else []) + state.declarations
    if not lines:
        return ""
    return CRLF.join(lines) + CRLF + "}" + CRLF
