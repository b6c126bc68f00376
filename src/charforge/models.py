"""Enums and Pydantic models for colors, templates, layers, and sheet metadata.

Pixel buffers themselves live in plain dataclasses (see
:mod:`charforge.canvas`); everything in this module is small,
JSON-serializable metadata.
"""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field

from charforge.errors import InvalidEnumError

# ---------------------------------------------------------------------------
# Closed value sets
# ---------------------------------------------------------------------------


class BlendMode(str, Enum):
    """Per-channel blend functions used when compositing layers."""

    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    ADD = "add"


class PartSlot(str, Enum):
    """The twelve body slots a part can be equipped to."""

    HAIR_BACK = "hair-back"
    HAIR_FRONT = "hair-front"
    EYES = "eyes"
    NOSE = "nose"
    MOUTH = "mouth"
    EARS = "ears"
    TORSO = "torso"
    ARMS_LEFT = "arms-left"
    ARMS_RIGHT = "arms-right"
    LEGS = "legs"
    FEET_LEFT = "feet-left"
    FEET_RIGHT = "feet-right"


class BuildType(str, Enum):
    SKINNY = "skinny"
    NORMAL = "normal"
    MUSCULAR = "muscular"


class HeightType(str, Enum):
    SHORT = "short"
    AVERAGE = "average"
    TALL = "tall"


class ViewDirection(str, Enum):
    """Directions a character can be rendered from."""

    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"
    FRONT_LEFT = "front-left"
    FRONT_RIGHT = "front-right"
    BACK_LEFT = "back-left"
    BACK_RIGHT = "back-right"


class SheetLayout(str, Enum):
    GRID = "grid"
    STRIP_HORIZONTAL = "strip-horizontal"
    STRIP_VERTICAL = "strip-vertical"


class ColorCategory(str, Enum):
    """Which entry of a :class:`ColorScheme` recolors a part."""

    SKIN = "skin"
    HAIR = "hair"
    EYES = "eyes"
    OUTFIT_PRIMARY = "outfit-primary"
    OUTFIT_SECONDARY = "outfit-secondary"


class RegionType(str, Enum):
    PRIMARY = "primary"
    SHADOW = "shadow"
    HIGHLIGHT = "highlight"


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: E | str, label: str) -> E:
    """Coerce *value* into *enum_cls*, failing with a readable message.

    Args:
        enum_cls: The target enum class.
        value: An enum member or its string value.
        label: Human-readable name of the value (e.g. ``"build type"``).

    Returns:
        The matching enum member.

    Raises:
        InvalidEnumError: If *value* is not a member of *enum_cls*.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(str(m.value) for m in enum_cls)
        raise InvalidEnumError(
            f"Invalid {label}: {value!r}. Valid values: {valid}"
        ) from None


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


class Color(BaseModel):
    """An RGBA color with 8-bit channels.

    Attributes:
        r: Red channel (0–255).
        g: Green channel (0–255).
        b: Blue channel (0–255).
        a: Alpha channel (0–255, default fully opaque).
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)
    a: int = Field(default=255, ge=0, le=255)

    @classmethod
    def from_rgba(cls, rgba: tuple[int, int, int, int]) -> "Color":
        """Build a color from an ``(R, G, B, A)`` tuple."""
        r, g, b, a = rgba
        return cls(r=r, g=g, b=b, a=a)

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        """Return the color as an ``(R, G, B, A)`` tuple."""
        return (self.r, self.g, self.b, self.a)


TRANSPARENT = Color(r=0, g=0, b=0, a=0)


class ColorVariant(BaseModel):
    """A base color with its derived shadow and highlight shades."""

    primary: Color
    shadow: Color
    highlight: Color


class ColorScheme(BaseModel):
    """Complete coloring for a character.

    Outfit fields serialize with camelCase keys so saved characters stay
    readable by tools that expect the ``outfitPrimary`` spelling.
    """

    model_config = ConfigDict(populate_by_name=True)

    skin: ColorVariant
    hair: ColorVariant
    eyes: Color
    outfit_primary: ColorVariant = Field(alias="outfitPrimary")
    outfit_secondary: ColorVariant = Field(alias="outfitSecondary")


# ---------------------------------------------------------------------------
# Body templates
# ---------------------------------------------------------------------------


class AnchorPoint(BaseModel):
    """A template position a part is centered on."""

    x: int
    y: int
    slot: str


class TemplateAnchors(BaseModel):
    """Anchor points grouped by body region."""

    head: list[AnchorPoint] = []
    torso: list[AnchorPoint] = []
    legs: list[AnchorPoint] = []
    arms: list[AnchorPoint] = []
    feet: list[AnchorPoint] = []

    def flatten(self) -> list[AnchorPoint]:
        """Return every anchor in head, torso, legs, arms, feet order."""
        return [*self.head, *self.torso, *self.legs, *self.arms, *self.feet]


class BodyTemplate(BaseModel):
    """Body silhouette description with anchor points for part attachment.

    Attributes:
        id: Template identifier.
        width: Template width in pixels.
        height: Template height in pixels.
        style: Art style tag (e.g. "chibi").
        anchors: Anchor points grouped by body region.
    """

    id: str
    width: int
    height: int
    style: str
    anchors: TemplateAnchors


# ---------------------------------------------------------------------------
# Layered sprite metadata
# ---------------------------------------------------------------------------


class LayerMeta(BaseModel):
    """Everything about a layer except its pixels."""

    name: str
    opacity: int = Field(default=255, ge=0, le=255)
    visible: bool = True
    blend: BlendMode = BlendMode.NORMAL


class SpriteMeta(BaseModel):
    """Contents of a ``<base>.meta.json`` file."""

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    layers: list[LayerMeta]


# ---------------------------------------------------------------------------
# Sprite sheet metadata
# ---------------------------------------------------------------------------


class FrameRect(BaseModel):
    """Placement of one frame inside a packed sheet."""

    name: str
    x: int
    y: int
    w: int
    h: int


class SheetMetadata(BaseModel):
    """Frame placements plus the uniform tile size of a packed sheet."""

    model_config = ConfigDict(populate_by_name=True)

    frames: list[FrameRect] = []
    tile_width: int = Field(default=0, alias="tileWidth")
    tile_height: int = Field(default=0, alias="tileHeight")


class TiledMetadata(SheetMetadata):
    """Sheet metadata extended with the atlas image for the Tiled editor."""

    image: str
    image_width: int = Field(alias="imageWidth")
    image_height: int = Field(alias="imageHeight")
