"""Character building: bodies, parts, recoloring, templates and assembly."""

from charforge.character.assembly import AssembledCharacter, assemble_character
from charforge.character.body import BaseBodySprite, create_base_body
from charforge.character.character import (
    Character,
    create_character,
    equip_part,
    load_character,
    render_character,
    save_character,
    set_character_colors,
    unequip_part,
)
from charforge.character.parts import (
    CharacterPart,
    ColorRegions,
    EyeStyle,
    HairStyle,
    TorsoStyle,
    create_eye_part,
    create_hair_part,
    create_torso_part,
)
from charforge.character.recolor import (
    COLOR_PRESETS,
    apply_color_scheme,
    apply_color_to_part,
    color_category_for_slot,
    create_color_scheme,
    derive_variant,
)
from charforge.character.registry import PartRegistry, default_registry
from charforge.character.template import (
    create_body_template,
    find_anchor_for_slot,
    load_template,
    validate_template,
)
from charforge.character.view import ALL_VIEW_DIRECTIONS, parse_view_directions

__all__ = [
    "ALL_VIEW_DIRECTIONS",
    "AssembledCharacter",
    "BaseBodySprite",
    "COLOR_PRESETS",
    "Character",
    "CharacterPart",
    "ColorRegions",
    "EyeStyle",
    "HairStyle",
    "PartRegistry",
    "TorsoStyle",
    "apply_color_scheme",
    "apply_color_to_part",
    "assemble_character",
    "color_category_for_slot",
    "create_base_body",
    "create_body_template",
    "create_character",
    "create_color_scheme",
    "create_eye_part",
    "create_hair_part",
    "create_torso_part",
    "default_registry",
    "derive_variant",
    "equip_part",
    "find_anchor_for_slot",
    "load_character",
    "load_template",
    "parse_view_directions",
    "render_character",
    "save_character",
    "set_character_colors",
    "unequip_part",
    "validate_template",
]
