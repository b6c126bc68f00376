"""Per-channel blend mode arithmetic."""

from __future__ import annotations

import math

from charforge.models import BlendMode, parse_enum


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ``.5`` going up.

    Python's :func:`round` uses banker's rounding, which would shift
    blended channels by one on exact halves.
    """
    return int(math.floor(value + 0.5))


def apply_blend_mode(base: int, blend: int, mode: BlendMode | str) -> int:
    """Blend one destination channel with one source channel.

    Args:
        base: Destination channel value (0–255).
        blend: Source channel value (0–255).
        mode: Blend mode to apply.

    Returns:
        The blended channel value, rounded half up and within 0–255.

    Raises:
        InvalidEnumError: If *mode* is not a known blend mode.
    """
    mode = parse_enum(BlendMode, mode, "blend mode")

    if mode is BlendMode.NORMAL:
        return blend
    if mode is BlendMode.MULTIPLY:
        return round_half_up(base * blend / 255)
    if mode is BlendMode.SCREEN:
        return round_half_up(255 - (255 - base) * (255 - blend) / 255)
    if mode is BlendMode.OVERLAY:
        if base < 128:
            return round_half_up(2 * base * blend / 255)
        return round_half_up(255 - 2 * (255 - base) * (255 - blend) / 255)
    return min(base + blend, 255)
