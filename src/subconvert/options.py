"""Conversion options shared by the library entry points and the CLI."""

from pydantic import BaseModel, Field


class ConversionOptions(BaseModel):
    """Tunables for ASS -> SRT/VTT conversion."""

    # ASS control codes are not part of SRT/VTT (some players still show them).
    strip_control_codes: bool = True
    # Turn \b, \i, \u toggles into <b>, <i>, <u>. Only used with strip_control_codes.
    convert_codes_to_tags: bool = True
    # Lines this short or shorter are dropped (ASS animations flicker otherwise).
    min_duration_ms: int = Field(default=300, ge=0)
    # VTT only: always draw a contrasting outline behind styled text.
    force_contrast_outline: bool = True
