"""CharForge: pixel-art character sprite compositing and sheet packing."""

from charforge.canvas import Canvas, create_canvas
from charforge.character import (
    AssembledCharacter,
    BaseBodySprite,
    Character,
    CharacterPart,
    PartRegistry,
    assemble_character,
    create_base_body,
    create_character,
    default_registry,
    equip_part,
    render_character,
)
from charforge.color import parse_hex, to_hex
from charforge.composite import alpha_blend, flatten_layers
from charforge.config import CharacterRecipe, load_recipe, render_recipe
from charforge.errors import (
    BufferSizeMismatchError,
    CharForgeError,
    ConfigError,
    InvalidEnumError,
    LayerError,
    MalformedColorError,
    MalformedMetadataError,
    OutOfBoundsError,
    TemplateInvalidError,
)
from charforge.layers import Layer, LayeredCanvas, create_layered_canvas
from charforge.logging import get_logger, setup_logging
from charforge.models import (
    BlendMode,
    BuildType,
    Color,
    ColorScheme,
    HeightType,
    PartSlot,
    SheetLayout,
    ViewDirection,
)
from charforge.palette import PRESET_PALETTES, Palette
from charforge.sheet import Frame, PackedSheet, pack_sheet

__all__ = [
    "AssembledCharacter",
    "BaseBodySprite",
    "BlendMode",
    "BufferSizeMismatchError",
    "BuildType",
    "Canvas",
    "CharForgeError",
    "Character",
    "CharacterPart",
    "CharacterRecipe",
    "Color",
    "ColorScheme",
    "ConfigError",
    "Frame",
    "HeightType",
    "InvalidEnumError",
    "Layer",
    "LayerError",
    "LayeredCanvas",
    "MalformedColorError",
    "MalformedMetadataError",
    "OutOfBoundsError",
    "PRESET_PALETTES",
    "PackedSheet",
    "Palette",
    "PartRegistry",
    "PartSlot",
    "SheetLayout",
    "TemplateInvalidError",
    "ViewDirection",
    "alpha_blend",
    "assemble_character",
    "create_base_body",
    "create_canvas",
    "create_character",
    "create_layered_canvas",
    "default_registry",
    "equip_part",
    "flatten_layers",
    "get_logger",
    "load_recipe",
    "pack_sheet",
    "parse_hex",
    "render_character",
    "render_recipe",
    "setup_logging",
    "to_hex",
]
