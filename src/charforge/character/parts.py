"""Equippable character parts and their procedural generators.

A :class:`CharacterPart` is a small canvas plus the metadata needed to
recolor and place it.  Generators draw placeholder artwork with the
drawing primitives; every pixel painted in a placeholder primary, shadow
or highlight color is recorded in the part's color regions so a
:class:`~charforge.models.ColorScheme` can repaint it later.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from charforge.canvas import Canvas, create_canvas
from charforge.character.view import facing_offset, is_side_view
from charforge.draw import draw_circle, draw_line, draw_rect, set_pixel
from charforge.errors import OutOfBoundsError
from charforge.models import (
    Color,
    PartSlot,
    RegionType,
    ViewDirection,
    parse_enum,
)

Coordinate = tuple[int, int]


class HairStyle(str, Enum):
    SPIKY = "spiky"
    LONG = "long"
    CURLY = "curly"


class EyeStyle(str, Enum):
    ROUND = "round"
    ANIME = "anime"
    SMALL = "small"


class TorsoStyle(str, Enum):
    BASIC_SHIRT = "basic-shirt"
    ARMOR = "armor"
    ROBE = "robe"


# Placeholder artwork colors; schemes repaint the recorded regions.
HAIR = Color(r=101, g=67, b=33)
HAIR_SHADOW = Color(r=80, g=52, b=25)
HAIR_HIGHLIGHT = Color(r=130, g=95, b=60)
EYE_WHITE = Color(r=250, g=250, b=250)
EYE_IRIS = Color(r=74, g=122, b=188)
EYE_PUPIL = Color(r=26, g=26, b=42)
SHIRT = Color(r=204, g=51, b=51)
SHIRT_SHADOW = Color(r=170, g=40, b=40)
SHIRT_HIGHLIGHT = Color(r=230, g=90, b=90)
ARMOR = Color(r=160, g=160, b=160)
ARMOR_SHADOW = Color(r=120, g=120, b=120)
ARMOR_HIGHLIGHT = Color(r=200, g=200, b=200)

HAIR_SIZES: dict[HairStyle, tuple[int, int]] = {
    HairStyle.SPIKY: (16, 16),
    HairStyle.LONG: (16, 20),
    HairStyle.CURLY: (18, 18),
}
EYE_SIZES: dict[EyeStyle, tuple[int, int]] = {
    EyeStyle.ROUND: (12, 6),
    EyeStyle.ANIME: (14, 8),
    EyeStyle.SMALL: (10, 4),
}
TORSO_SIZES: dict[TorsoStyle, tuple[int, int]] = {
    TorsoStyle.BASIC_SHIRT: (16, 20),
    TorsoStyle.ARMOR: (16, 20),
    TorsoStyle.ROBE: (18, 24),
}


@dataclass
class ColorRegions:
    """Part-local coordinates grouped by the shade that recolors them."""

    primary: list[Coordinate] = field(default_factory=list)
    shadow: list[Coordinate] = field(default_factory=list)
    highlight: list[Coordinate] | None = None

    def get(self, region_type: RegionType) -> list[Coordinate]:
        if region_type is RegionType.PRIMARY:
            return self.primary
        if region_type is RegionType.SHADOW:
            return self.shadow
        return self.highlight or []

    def all(self) -> list[Coordinate]:
        return [*self.primary, *self.shadow, *(self.highlight or [])]

    def clone(self) -> "ColorRegions":
        return ColorRegions(
            primary=list(self.primary),
            shadow=list(self.shadow),
            highlight=None if self.highlight is None else list(self.highlight),
        )


@dataclass
class CharacterPart(Canvas):
    """A recolorable piece of character artwork bound to one body slot.

    Attributes:
        id: Unique part identifier (e.g. ``"hair-spiky"``).
        slot: Body slot the part attaches to.
        colorable: Whether color schemes repaint the part.
        color_regions: Coordinates repainted per shade.
        compatible_bodies: Body template ids the part fits, or ``["all"]``.
    """

    id: str = ""
    slot: str = PartSlot.TORSO.value
    colorable: bool = True
    color_regions: ColorRegions = field(default_factory=ColorRegions)
    compatible_bodies: list[str] = field(default_factory=lambda: ["all"])

    def clone(self) -> "CharacterPart":
        """Return a deep copy; buffer and region lists are not shared."""
        return CharacterPart(
            width=self.width,
            height=self.height,
            buffer=bytearray(self.buffer),
            id=self.id,
            slot=self.slot,
            colorable=self.colorable,
            color_regions=self.color_regions.clone(),
            compatible_bodies=list(self.compatible_bodies),
        )

    def validate_regions(self) -> None:
        """Check that every color-region coordinate lies inside the part.

        Recoloring skips stray coordinates on its own; call this when
        building parts from untrusted data to fail early instead.

        Raises:
            OutOfBoundsError: On the first coordinate outside the part.
        """
        for x, y in self.color_regions.all():
            if not self.in_bounds(x, y):
                raise OutOfBoundsError(
                    f"Color region coordinate ({x}, {y}) outside "
                    f"{self.width}x{self.height} part {self.id!r}"
                )


# ---------------------------------------------------------------------------
# Drawing helpers
# ---------------------------------------------------------------------------


def _fill_rect(canvas: Canvas, x0: int, y0: int, x1: int, y1: int, color: Color) -> None:
    """Filled rectangle clipped to the canvas."""
    left, right = max(0, min(x0, x1)), min(canvas.width - 1, max(x0, x1))
    top, bottom = max(0, min(y0, y1)), min(canvas.height - 1, max(y0, y1))
    if left <= right and top <= bottom:
        draw_rect(canvas, left, top, right, bottom, color, filled=True)


def _hline(canvas: Canvas, x0: int, x1: int, y: int, color: Color) -> None:
    if not 0 <= y < canvas.height:
        return
    left, right = max(0, min(x0, x1)), min(canvas.width - 1, max(x0, x1))
    if left <= right:
        draw_line(canvas, left, y, right, y, color)


def _plot(canvas: Canvas, x: int, y: int, color: Color) -> None:
    if canvas.in_bounds(x, y):
        set_pixel(canvas, x, y, color)


def collect_regions(
    canvas: Canvas,
    primary: Color,
    shadow: Color | None = None,
    highlight: Color | None = None,
) -> ColorRegions:
    """Record the coordinates of every pixel painted in a placeholder shade.

    Coordinates are listed in row-major order.  ``highlight`` stays
    ``None`` unless at least one highlight pixel is present.
    """
    regions = ColorRegions()
    found_highlight: list[Coordinate] = []
    lookup = {primary.rgba: regions.primary}
    if shadow is not None:
        lookup[shadow.rgba] = regions.shadow
    if highlight is not None:
        lookup[highlight.rgba] = found_highlight

    buf = canvas.buffer
    for y in range(canvas.height):
        for x in range(canvas.width):
            o = canvas.offset(x, y)
            target = lookup.get((buf[o], buf[o + 1], buf[o + 2], buf[o + 3]))
            if target is not None:
                target.append((x, y))

    if found_highlight:
        regions.highlight = found_highlight
    return regions


def _lean(direction: ViewDirection) -> int:
    """-1, 0 or 1 depending on which way the view turns."""
    offset = facing_offset(direction)
    return (offset > 0) - (offset < 0)


def _eye_centers(width: int, direction: ViewDirection) -> list[int]:
    """Horizontal eye centers: one for profile views, two otherwise."""
    if is_side_view(direction):
        return [width // 2 + facing_offset(direction)]
    step = _lean(direction)
    return [width // 4 + step, (3 * width) // 4 + step]


# ---------------------------------------------------------------------------
# Hair
# ---------------------------------------------------------------------------


def _draw_spiky_hair(canvas: Canvas, direction: ViewDirection) -> None:
    shift = facing_offset(direction)
    count = 2 if is_side_view(direction) else 3
    band_top = 8

    _fill_rect(canvas, 2, band_top, canvas.width - 3, band_top + 3, HAIR)
    _hline(canvas, 2, canvas.width - 3, band_top + 3, HAIR_SHADOW)

    for i in range(count):
        center = canvas.width // 2 + shift + (2 * i - (count - 1)) * 2
        spike_height = 8 - i % 2
        for level in range(spike_height):
            y = band_top - 1 - level
            half = (spike_height - 1 - level) // 2
            _hline(canvas, center - half, center + half, y, HAIR)
            if half > 0:
                _plot(canvas, center - half, y, HAIR_SHADOW)
                _plot(canvas, center + half, y, HAIR_SHADOW)
        if direction is not ViewDirection.BACK:
            _plot(canvas, center, band_top - spike_height, HAIR_HIGHLIGHT)


def _draw_long_hair(canvas: Canvas, direction: ViewDirection) -> None:
    shift = facing_offset(direction)
    width = 10 if is_side_view(direction) else canvas.width - 2
    left = max(0, 1 + shift)
    right = min(canvas.width - 1, left + width - 1)
    bottom = canvas.height - 5

    _fill_rect(canvas, left, 0, right, bottom, HAIR)
    draw_line(canvas, left, 0, left, bottom, HAIR_SHADOW)
    draw_line(canvas, right, 0, right, bottom, HAIR_SHADOW)

    # Ragged fringe below the main mass.
    phase = 1 if direction is ViewDirection.BACK else 0
    for x in range(left + 1, right):
        _plot(canvas, x, bottom + 1 + (x + phase) % 3, HAIR)

    if direction is not ViewDirection.BACK:
        streak = left + 3 if shift <= 0 else right - 3
        draw_line(canvas, streak, 2, streak, 6, HAIR_HIGHLIGHT)


def _draw_curly_hair(canvas: Canvas, direction: ViewDirection) -> None:
    shift = facing_offset(direction)
    spacing = 6 if direction is ViewDirection.BACK else 7
    columns = [canvas.width // 2 + shift] if is_side_view(direction) else [
        5 + shift,
        5 + spacing + shift,
    ]
    radius = 3

    for row_y in (5, 11):
        for cx in columns:
            draw_circle(canvas, cx, row_y, radius, HAIR, filled=True)
            draw_circle(canvas, cx, row_y, radius, HAIR_SHADOW)
            if direction is not ViewDirection.BACK:
                _plot(canvas, cx - 1, row_y - 1, HAIR_HIGHLIGHT)


# ---------------------------------------------------------------------------
# Eyes
# ---------------------------------------------------------------------------


def _draw_round_eyes(canvas: Canvas, direction: ViewDirection) -> None:
    cy = canvas.height // 2
    for cx in _eye_centers(canvas.width, direction):
        draw_circle(canvas, cx, cy, 2, EYE_WHITE, filled=True)
        _plot(canvas, cx, cy, EYE_IRIS)
        _plot(canvas, cx, cy + 1, EYE_PUPIL)


def _draw_anime_eyes(canvas: Canvas, direction: ViewDirection) -> None:
    cy = canvas.height // 2
    for cx in _eye_centers(canvas.width, direction):
        _fill_rect(canvas, cx - 2, cy - 1, cx + 2, cy + 2, EYE_WHITE)
        _hline(canvas, cx - 1, cx + 1, cy, EYE_IRIS)
        _plot(canvas, cx, cy + 1, EYE_PUPIL)


def _draw_small_eyes(canvas: Canvas, direction: ViewDirection) -> None:
    cy = canvas.height // 2
    for cx in _eye_centers(canvas.width, direction):
        _plot(canvas, cx, cy, EYE_IRIS)
        _plot(canvas, cx, cy + 1, EYE_PUPIL)


# ---------------------------------------------------------------------------
# Torso
# ---------------------------------------------------------------------------


def _draw_basic_shirt(canvas: Canvas, direction: ViewDirection) -> None:
    shift = _lean(direction)
    width = canvas.width - 4
    if is_side_view(direction):
        width = int(width * 0.7)
    left = max(0, 2 + shift)
    right = min(canvas.width - 1, left + width - 1)
    top, bottom = 2, canvas.height - 3

    _fill_rect(canvas, left, top, right, bottom, SHIRT)
    shadow_on_left = direction in (
        ViewDirection.BACK,
        ViewDirection.RIGHT,
        ViewDirection.FRONT_RIGHT,
        ViewDirection.BACK_RIGHT,
    )
    if shadow_on_left:
        _fill_rect(canvas, left, top, left + 3, bottom, SHIRT_SHADOW)
    else:
        _fill_rect(canvas, right - 3, top, right, bottom, SHIRT_SHADOW)
    if direction is not ViewDirection.BACK:
        _hline(canvas, left + 4, right - 4, top, SHIRT_HIGHLIGHT)


def _draw_armor(canvas: Canvas, direction: ViewDirection) -> None:
    shift = _lean(direction)
    width = canvas.width - 2
    if is_side_view(direction):
        width = int(width * 0.6)
    elif shift:
        width = int(width * 0.8)
    plate_spacing = 3 if direction is ViewDirection.BACK else 4
    left = max(0, 1 + shift)
    right = min(canvas.width - 1, left + width - 1)
    top, bottom = 1, canvas.height - 2

    _fill_rect(canvas, left, top, right, bottom, ARMOR)
    for y in range(top + plate_spacing, bottom, plate_spacing):
        _hline(canvas, left, right, y, ARMOR_SHADOW)
    _hline(canvas, left, right, top, ARMOR_HIGHLIGHT)


def _draw_robe(canvas: Canvas, direction: ViewDirection) -> None:
    shift = _lean(direction)
    width = canvas.width - 2
    if is_side_view(direction):
        width = int(width * 0.7)
    elif shift:
        width = int(width * 0.8)
    left = max(0, 1 + shift)
    right = min(canvas.width - 1, left + width - 1)
    belt_y = canvas.height // 2 + (1 if direction is ViewDirection.BACK else 0)

    _fill_rect(canvas, left, 1, right, canvas.height - 2, SHIRT)
    _fill_rect(canvas, left + 1, belt_y, right - 1, belt_y + 1, SHIRT_SHADOW)


_HAIR_PAINTERS = {
    HairStyle.SPIKY: _draw_spiky_hair,
    HairStyle.LONG: _draw_long_hair,
    HairStyle.CURLY: _draw_curly_hair,
}
_EYE_PAINTERS = {
    EyeStyle.ROUND: _draw_round_eyes,
    EyeStyle.ANIME: _draw_anime_eyes,
    EyeStyle.SMALL: _draw_small_eyes,
}
_TORSO_PAINTERS = {
    TorsoStyle.BASIC_SHIRT: _draw_basic_shirt,
    TorsoStyle.ARMOR: _draw_armor,
    TorsoStyle.ROBE: _draw_robe,
}


# ---------------------------------------------------------------------------
# Public generators
# ---------------------------------------------------------------------------


def create_hair_part(
    style: HairStyle | str,
    direction: ViewDirection | str = ViewDirection.FRONT,
) -> CharacterPart:
    """Generate a hair part for the ``hair-front`` slot.

    Args:
        style: ``spiky``, ``long`` or ``curly``.
        direction: View direction the artwork faces.

    Returns:
        A colorable part with primary, shadow and (except from the back)
        highlight regions.

    Raises:
        InvalidEnumError: If the style or direction is unknown.
    """
    style = parse_enum(HairStyle, style, "hair style")
    direction = parse_enum(ViewDirection, direction, "view direction")
    canvas = create_canvas(*HAIR_SIZES[style])
    _HAIR_PAINTERS[style](canvas, direction)
    return CharacterPart(
        width=canvas.width,
        height=canvas.height,
        buffer=canvas.buffer,
        id=f"hair-{style.value}",
        slot=PartSlot.HAIR_FRONT.value,
        color_regions=collect_regions(canvas, HAIR, HAIR_SHADOW, HAIR_HIGHLIGHT),
    )


def create_eye_part(
    style: EyeStyle | str,
    direction: ViewDirection | str = ViewDirection.FRONT,
) -> CharacterPart:
    """Generate an eye pair for the ``eyes`` slot.

    Only iris pixels are recorded as primary; whites and pupils keep
    their colors.  The back view is empty and profile views hold a
    single eye.

    Raises:
        InvalidEnumError: If the style or direction is unknown.
    """
    style = parse_enum(EyeStyle, style, "eye style")
    direction = parse_enum(ViewDirection, direction, "view direction")
    canvas = create_canvas(*EYE_SIZES[style])
    if direction is not ViewDirection.BACK:
        _EYE_PAINTERS[style](canvas, direction)
    return CharacterPart(
        width=canvas.width,
        height=canvas.height,
        buffer=canvas.buffer,
        id=f"eyes-{style.value}",
        slot=PartSlot.EYES.value,
        color_regions=collect_regions(canvas, EYE_IRIS),
    )


def create_torso_part(
    style: TorsoStyle | str,
    direction: ViewDirection | str = ViewDirection.FRONT,
) -> CharacterPart:
    """Generate clothing for the ``torso`` slot.

    Raises:
        InvalidEnumError: If the style or direction is unknown.
    """
    style = parse_enum(TorsoStyle, style, "torso style")
    direction = parse_enum(ViewDirection, direction, "view direction")
    canvas = create_canvas(*TORSO_SIZES[style])
    _TORSO_PAINTERS[style](canvas, direction)

    if style is TorsoStyle.ARMOR:
        regions = collect_regions(canvas, ARMOR, ARMOR_SHADOW, ARMOR_HIGHLIGHT)
    else:
        regions = collect_regions(canvas, SHIRT, SHIRT_SHADOW, SHIRT_HIGHLIGHT)
    return CharacterPart(
        width=canvas.width,
        height=canvas.height,
        buffer=canvas.buffer,
        id=f"torso-{style.value}",
        slot=PartSlot.TORSO.value,
        color_regions=regions,
    )
