"""YAML character recipes: loading, validation and rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from charforge.character.character import (
    CHARACTER_ID_PATTERN,
    Character,
    create_character,
    equip_part,
    render_character,
    set_character_colors,
)
from charforge.character.parts import (
    CharacterPart,
    EyeStyle,
    HairStyle,
    TorsoStyle,
    create_eye_part,
    create_hair_part,
    create_torso_part,
)
from charforge.character.view import parse_view_directions
from charforge.color import parse_hex
from charforge.errors import CharForgeError, ConfigError
from charforge.logging import get_logger
from charforge.models import (
    BuildType,
    Color,
    HeightType,
    PartSlot,
    SheetLayout,
    ViewDirection,
    parse_enum,
)
from charforge.sheet import Frame, PackedSheet, pack_sheet

logger = get_logger("config")

PartKind = Literal["hair", "eyes", "torso"]

# kind -> (style enum, generator, slot the generated part occupies)
_PART_KINDS: dict[str, tuple[type, Callable[..., CharacterPart], PartSlot]] = {
    "hair": (HairStyle, create_hair_part, PartSlot.HAIR_FRONT),
    "eyes": (EyeStyle, create_eye_part, PartSlot.EYES),
    "torso": (TorsoStyle, create_torso_part, PartSlot.TORSO),
}


# ---------------------------------------------------------------------------
# Recipe models
# ---------------------------------------------------------------------------


class CharacterSection(BaseModel):
    id: str = Field(..., pattern=CHARACTER_ID_PATTERN)
    build: BuildType = BuildType.NORMAL
    height: HeightType = HeightType.AVERAGE


class PartChoice(BaseModel):
    """One generated part: which generator and which of its styles."""

    kind: PartKind
    style: str

    @model_validator(mode="after")
    def _check_style(self) -> "PartChoice":
        style_enum = _PART_KINDS[self.kind][0]
        valid = [member.value for member in style_enum]
        if self.style not in valid:
            raise ValueError(
                f"Unknown {self.kind} style {self.style!r}. "
                f"Valid styles: {', '.join(valid)}"
            )
        return self

    @property
    def slot(self) -> PartSlot:
        return _PART_KINDS[self.kind][2]

    def create(self, direction: ViewDirection) -> CharacterPart:
        """Generate the part facing *direction*."""
        return _PART_KINDS[self.kind][1](self.style, direction)


class ColorsSection(BaseModel):
    """Base colors as hex strings; omitted entries keep the defaults."""

    skin: Optional[Color] = None
    hair: Optional[Color] = None
    eyes: Optional[Color] = None
    outfit_primary: Optional[Color] = None
    outfit_secondary: Optional[Color] = None

    @field_validator("*", mode="before")
    @classmethod
    def _parse_hex(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return parse_hex(value)
            except CharForgeError as exc:
                raise ValueError(str(exc)) from exc
        return value


class SheetSection(BaseModel):
    layout: SheetLayout = SheetLayout.GRID
    padding: int = Field(default=0, ge=0)


class CharacterRecipe(BaseModel):
    """A complete recipe: who the character is and how to render it."""

    character: CharacterSection
    parts: dict[PartSlot, PartChoice] = Field(default_factory=dict)
    colors: ColorsSection = Field(default_factory=ColorsSection)
    views: list[ViewDirection] = Field(default_factory=lambda: [ViewDirection.FRONT])
    sheet: SheetSection = Field(default_factory=SheetSection)
    output_path: str = ""

    @field_validator("views", mode="before")
    @classmethod
    def _parse_views(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return parse_view_directions(value)
            except CharForgeError as exc:
                raise ValueError(str(exc)) from exc
        return value

    @field_validator("views")
    @classmethod
    def _views_not_empty(cls, value: list[ViewDirection]) -> list[ViewDirection]:
        if not value:
            raise ValueError("At least one view direction is required")
        return value

    @model_validator(mode="after")
    def _parts_fit_slots(self) -> "CharacterRecipe":
        for slot, choice in self.parts.items():
            if choice.slot is not slot:
                raise ValueError(
                    f"A {choice.kind} part goes in slot {choice.slot.value!r}, "
                    f"not {slot.value!r}"
                )
        return self


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def validate_recipe_path(path: str | Path) -> Path:
    """Return *path* as a ``Path``.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    resolved = Path(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"Recipe file not found: {resolved}")
    return resolved


def _parse_yaml(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}"
        )
    return data


_MAPPING_SECTIONS = ("character", "parts", "colors", "sheet")


def load_recipe(path: str | Path) -> CharacterRecipe:
    """Load and validate a character recipe from a YAML file.

    Args:
        path: Path to the YAML recipe.

    Returns:
        The validated recipe.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the YAML is malformed, a section has the wrong
            type, or any value fails validation.
    """
    resolved = validate_recipe_path(path)
    data = _parse_yaml(resolved)

    if "character" not in data:
        raise ConfigError("Missing required 'character' section in recipe")
    for section in _MAPPING_SECTIONS:
        if section in data and not isinstance(data[section], dict):
            raise ConfigError(
                f"'{section}' section must be a YAML mapping, "
                f"got {type(data[section]).__name__}"
            )

    try:
        recipe = CharacterRecipe.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid recipe {resolved}: {exc}") from exc

    logger.info(
        "Loaded recipe for %s from %s (%d parts, %d views)",
        recipe.character.id,
        resolved,
        len(recipe.parts),
        len(recipe.views),
    )
    return recipe


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def build_character(
    recipe: CharacterRecipe, direction: ViewDirection | str = ViewDirection.FRONT
) -> Character:
    """Create the recipe's character with parts generated for *direction*."""
    section = recipe.character
    character = create_character(section.id, section.build, section.height)
    colors = recipe.colors
    character = set_character_colors(
        character,
        skin=colors.skin,
        hair=colors.hair,
        eyes=colors.eyes,
        outfit_primary=colors.outfit_primary,
        outfit_secondary=colors.outfit_secondary,
    )
    view = parse_enum(ViewDirection, direction, "view direction")
    for slot, choice in recipe.parts.items():
        character = equip_part(character, slot, choice.create(view))
    return character


def render_recipe(recipe: CharacterRecipe) -> PackedSheet:
    """Render every view in the recipe and pack them into one sheet.

    Frames are named ``<id>_<direction>`` and follow the order of
    ``views``.
    """
    frames = []
    for view in recipe.views:
        character = build_character(recipe, view)
        rendered = render_character(character, view)
        frames.append(Frame(rendered, name=f"{character.id}_{view.value}"))
    logger.debug("Rendered %d views of %s", len(frames), recipe.character.id)
    return pack_sheet(frames, recipe.sheet.layout, recipe.sheet.padding)
