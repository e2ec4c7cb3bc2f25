"""ASS colour conversion (ABGR -> RGBA) and light/dark classification."""

import re

_HEX_PAIR_RE = re.compile(r"[0-9a-fA-F]{2}")

# Perceived brightness above this (0-255 scale) counts as a light colour.
LIGHT_THRESHOLD = 155


def abgr_to_rgba(color: str) -> str:
    """Convert an ASS ``&HAABBGGRR`` / ``&HBBGGRR`` value to ``RRGGBB[AA]`` hex.

    ASS treats an explicit ``00`` alpha as "no transparency", so it is
    rewritten to ``FF`` (opaque) rather than carried over as invisible.
    """
    parts = _HEX_PAIR_RE.findall(color)
    parts.reverse()
    if len(parts) == 4 and parts[3] == "00":
        parts[3] = "FF"
    return "".join(parts)


def is_light(hex_color: str) -> bool:
    """Return True when *hex_color* (``#RRGGBB`` or ``RRGGBB[AA]``) is perceptually light."""
    value = hex_color.lstrip("#")
    red = int(value[0:2], 16)
    green = int(value[2:4], 16)
    blue = int(value[4:6], 16)
    brightness = (red * 299 + green * 587 + blue * 114) / 1000
    return brightness > LIGHT_THRESHOLD
