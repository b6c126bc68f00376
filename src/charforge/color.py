"""Hex color parsing and formatting."""

from __future__ import annotations

import re

from charforge.errors import MalformedColorError
from charforge.models import Color

_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")


def parse_hex(text: str) -> Color:
    """Parse ``#RGB``, ``#RRGGBB`` or ``#RRGGBBAA`` into a :class:`Color`.

    The leading ``#`` is optional.  Colors without an alpha component
    are fully opaque.

    Args:
        text: Hex color string.

    Returns:
        The parsed color.

    Raises:
        MalformedColorError: If the string is empty, contains non-hex
            characters, or has a length other than 3, 6 or 8.
    """
    digits = text[1:] if text.startswith("#") else text
    if not digits:
        raise MalformedColorError("Invalid hex color: empty string")
    if not _HEX_DIGITS.match(digits):
        raise MalformedColorError(
            f"Invalid hex color: contains non-hex characters in {text!r}"
        )

    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits) + "ff"
    elif len(digits) == 6:
        digits += "ff"
    elif len(digits) != 8:
        raise MalformedColorError(
            f"Invalid hex color length: expected 3, 6, or 8 characters, "
            f"got {len(digits)} in {text!r}"
        )

    r, g, b, a = (int(digits[i : i + 2], 16) for i in range(0, 8, 2))
    return Color(r=r, g=g, b=b, a=a)


def to_hex(color: Color) -> str:
    """Format a color as ``#rrggbb`` when opaque, else ``#rrggbbaa``."""
    base = f"#{color.r:02x}{color.g:02x}{color.b:02x}"
    if color.a == 255:
        return base
    return f"{base}{color.a:02x}"
