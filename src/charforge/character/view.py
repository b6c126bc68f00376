"""View directions a character can be rendered from."""

from __future__ import annotations

from charforge.errors import InvalidEnumError
from charforge.models import ViewDirection, parse_enum

ALL_VIEW_DIRECTIONS: tuple[ViewDirection, ...] = tuple(ViewDirection)

# Horizontal nudge applied to artwork when the figure turns.
_FACING_OFFSETS = {
    ViewDirection.FRONT: 0,
    ViewDirection.BACK: 0,
    ViewDirection.LEFT: -2,
    ViewDirection.RIGHT: 2,
    ViewDirection.FRONT_LEFT: -1,
    ViewDirection.BACK_LEFT: -1,
    ViewDirection.FRONT_RIGHT: 1,
    ViewDirection.BACK_RIGHT: 1,
}


def facing_offset(direction: ViewDirection) -> int:
    return _FACING_OFFSETS[direction]


def is_side_view(direction: ViewDirection) -> bool:
    """Whether *direction* is a pure profile (``left`` or ``right``)."""
    return direction in (ViewDirection.LEFT, ViewDirection.RIGHT)


def parse_view_directions(text: str) -> list[ViewDirection]:
    """Parse a comma-separated direction list, or ``"all"``.

    Args:
        text: e.g. ``"front, back"`` or ``"all"`` (case-insensitive).

    Returns:
        Directions in the order given.

    Raises:
        InvalidEnumError: If the list is empty or names an unknown direction.
    """
    if text.strip().lower() == "all":
        return list(ALL_VIEW_DIRECTIONS)

    names = [part.strip() for part in text.split(",") if part.strip()]
    if not names:
        raise InvalidEnumError("No valid view directions found")
    return [parse_enum(ViewDirection, name, "view direction") for name in names]
