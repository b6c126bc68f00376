"""Color schemes and region-based part recoloring."""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping

from charforge.character.parts import CharacterPart
from charforge.constants import HIGHLIGHT_AMOUNT, SHADOW_FACTOR
from charforge.draw import set_pixel
from charforge.logging import get_logger
from charforge.models import (
    Color,
    ColorCategory,
    ColorScheme,
    ColorVariant,
    RegionType,
)

logger = get_logger("recolor")


def _presets(**colors: tuple[int, int, int]) -> Mapping[str, Color]:
    return MappingProxyType({name: Color(r=r, g=g, b=b) for name, (r, g, b) in colors.items()})


COLOR_PRESETS: Mapping[str, Mapping[str, Color]] = MappingProxyType(
    {
        "skin": _presets(
            pale=(255, 220, 177),
            light=(241, 194, 125),
            medium=(224, 172, 105),
            dark=(198, 134, 66),
            very_dark=(141, 85, 36),
        ),
        "hair": _presets(
            black=(59, 48, 36),
            brown=(101, 67, 33),
            blonde=(218, 165, 32),
            red=(165, 42, 42),
            white=(245, 245, 220),
            silver=(192, 192, 192),
        ),
        "eyes": _presets(
            brown=(101, 67, 33),
            blue=(74, 122, 188),
            green=(34, 139, 34),
            hazel=(139, 119, 101),
            gray=(128, 128, 128),
        ),
        "outfit": _presets(
            red=(204, 51, 51),
            blue=(51, 102, 204),
            green=(51, 153, 51),
            purple=(153, 51, 204),
            orange=(255, 140, 0),
            black=(64, 64, 64),
            white=(240, 240, 240),
            gray=(160, 160, 160),
            brown=(139, 115, 85),
        ),
    }
)


def derive_variant(primary: Color) -> ColorVariant:
    """Build a variant whose shadow is 30% darker and highlight 40 brighter.

    Alpha is carried over unchanged to both derived shades.
    """
    shadow = Color(
        r=max(0, math.floor(primary.r * SHADOW_FACTOR)),
        g=max(0, math.floor(primary.g * SHADOW_FACTOR)),
        b=max(0, math.floor(primary.b * SHADOW_FACTOR)),
        a=primary.a,
    )
    highlight = Color(
        r=min(255, primary.r + HIGHLIGHT_AMOUNT),
        g=min(255, primary.g + HIGHLIGHT_AMOUNT),
        b=min(255, primary.b + HIGHLIGHT_AMOUNT),
        a=primary.a,
    )
    return ColorVariant(primary=primary, shadow=shadow, highlight=highlight)


def create_color_scheme(
    skin: Color,
    hair: Color,
    eyes: Color,
    outfit_primary: Color,
    outfit_secondary: Color,
) -> ColorScheme:
    """Expand five base colors into a full scheme with derived shades."""
    return ColorScheme(
        skin=derive_variant(skin),
        hair=derive_variant(hair),
        eyes=eyes,
        outfit_primary=derive_variant(outfit_primary),
        outfit_secondary=derive_variant(outfit_secondary),
    )


def apply_color_to_part(
    part: CharacterPart, region_type: RegionType | str, color: Color
) -> CharacterPart:
    """Return a copy of *part* with one color region painted *color*.

    Coordinates outside the part are skipped silently.

    Args:
        part: Source part (not modified).
        region_type: Which region to paint.
        color: Replacement color.

    Returns:
        A new part with an independent buffer.
    """
    colored = part.clone()
    try:
        region = RegionType(region_type)
    except ValueError:
        return colored

    for x, y in colored.color_regions.get(region):
        if colored.in_bounds(x, y):
            set_pixel(colored, x, y, color)
    return colored


def apply_color_scheme(
    part: CharacterPart, scheme: ColorScheme, category: ColorCategory | str
) -> CharacterPart:
    """Recolor *part* with the scheme entry for *category*.

    Variants paint primary, then shadow, then highlight; the eyes entry
    is a single color and only paints the primary region.  Parts that
    are not colorable, and unknown categories, yield an unmodified copy.
    """
    if not part.colorable:
        return part.clone()
    try:
        category = ColorCategory(category)
    except ValueError:
        logger.debug("Unknown color category %r; leaving %s unchanged", category, part.id)
        return part.clone()

    if category is ColorCategory.EYES:
        return apply_color_to_part(part, RegionType.PRIMARY, scheme.eyes)

    variant = {
        ColorCategory.SKIN: scheme.skin,
        ColorCategory.HAIR: scheme.hair,
        ColorCategory.OUTFIT_PRIMARY: scheme.outfit_primary,
        ColorCategory.OUTFIT_SECONDARY: scheme.outfit_secondary,
    }[category]
    colored = apply_color_to_part(part, RegionType.PRIMARY, variant.primary)
    colored = apply_color_to_part(colored, RegionType.SHADOW, variant.shadow)
    return apply_color_to_part(colored, RegionType.HIGHLIGHT, variant.highlight)


def color_category_for_slot(slot: str) -> ColorCategory:
    """Pick the scheme entry that recolors parts in *slot*.

    Face parts and any slot not otherwise listed use skin.
    """
    if slot.startswith("hair-"):
        return ColorCategory.HAIR
    if slot == "eyes":
        return ColorCategory.EYES
    if slot in ("torso", "legs"):
        return ColorCategory.OUTFIT_PRIMARY
    if slot.startswith(("arms-", "feet-")):
        return ColorCategory.OUTFIT_SECONDARY
    return ColorCategory.SKIN
