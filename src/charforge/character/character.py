"""Character entity: equipped parts, colors, and JSON persistence.

Characters are treated as values.  Every mutating operation returns a new
:class:`Character` with a refreshed ``last_modified`` timestamp and leaves
its input untouched.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Annotated, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from charforge.character.assembly import AssembledCharacter, assemble_character
from charforge.character.body import create_base_body
from charforge.character.parts import CharacterPart, ColorRegions
from charforge.character.recolor import COLOR_PRESETS, create_color_scheme
from charforge.constants import PART_Z_ORDER
from charforge.errors import MalformedMetadataError
from charforge.logging import get_logger
from charforge.models import (
    BuildType,
    Color,
    ColorScheme,
    HeightType,
    PartSlot,
    ViewDirection,
    parse_enum,
)

logger = get_logger("character")

CHARACTER_ID_PATTERN = r"^[A-Za-z0-9_-]+$"

Byte = Annotated[int, Field(ge=0, le=255)]
Coordinate = tuple[int, int]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Character:
    """A named character: body shape, equipped parts and colors.

    Attributes:
        id: Identifier made of letters, digits, ``-`` and ``_``.
        build: Body build.
        height: Body height.
        equipped_parts: Parts keyed by slot.
        color_scheme: Colors applied at render time.
        created: UTC creation time.
        last_modified: UTC time of the latest change.
    """

    id: str
    build: BuildType
    height: HeightType
    color_scheme: ColorScheme
    equipped_parts: dict[str, CharacterPart] = field(default_factory=dict)
    created: datetime = field(default_factory=_now)
    last_modified: datetime = field(default_factory=_now)


# ---------------------------------------------------------------------------
# JSON records
# ---------------------------------------------------------------------------


class RegionsRecord(BaseModel):
    primary: list[Coordinate] = []
    shadow: list[Coordinate] = []
    highlight: Optional[list[Coordinate]] = None


class PartRecord(BaseModel):
    """Serialized :class:`CharacterPart`; pixels are a plain byte list."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    slot: str
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    colorable: bool = True
    color_regions: RegionsRecord = Field(alias="colorRegions")
    compatible_bodies: list[str] = Field(
        default_factory=lambda: ["all"], alias="compatibleBodies"
    )
    buffer: list[Byte]

    @classmethod
    def from_part(cls, part: CharacterPart) -> "PartRecord":
        regions = part.color_regions
        return cls(
            id=part.id,
            slot=part.slot,
            width=part.width,
            height=part.height,
            colorable=part.colorable,
            color_regions=RegionsRecord(
                primary=list(regions.primary),
                shadow=list(regions.shadow),
                highlight=None if regions.highlight is None else list(regions.highlight),
            ),
            compatible_bodies=list(part.compatible_bodies),
            buffer=list(part.buffer),
        )

    def to_part(self) -> CharacterPart:
        """Rebuild the part.

        Raises:
            BufferSizeMismatchError: If the byte list does not match the size.
        """
        return CharacterPart(
            width=self.width,
            height=self.height,
            buffer=bytearray(self.buffer),
            id=self.id,
            slot=self.slot,
            colorable=self.colorable,
            color_regions=ColorRegions(
                primary=list(self.color_regions.primary),
                shadow=list(self.color_regions.shadow),
                highlight=(
                    None
                    if self.color_regions.highlight is None
                    else list(self.color_regions.highlight)
                ),
            ),
            compatible_bodies=list(self.compatible_bodies),
        )


class CharacterRecord(BaseModel):
    """On-disk JSON layout of a character."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., pattern=CHARACTER_ID_PATTERN)
    build: BuildType
    height: HeightType
    equipped_parts: dict[str, PartRecord] = Field(default_factory=dict, alias="equippedParts")
    color_scheme: ColorScheme = Field(alias="colorScheme")
    created: datetime
    last_modified: datetime = Field(alias="lastModified")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def _validate_id(character_id: str) -> str:
    if not character_id:
        raise ValueError("Invalid character ID: ID cannot be empty")
    if not re.match(CHARACTER_ID_PATTERN, character_id):
        raise ValueError(
            "Invalid character ID: only alphanumeric characters, hyphens, "
            "and underscores allowed"
        )
    return character_id


def default_color_scheme() -> ColorScheme:
    """Light skin, brown hair and eyes, blue and white outfit."""
    return create_color_scheme(
        COLOR_PRESETS["skin"]["light"],
        COLOR_PRESETS["hair"]["brown"],
        COLOR_PRESETS["eyes"]["brown"],
        COLOR_PRESETS["outfit"]["blue"],
        COLOR_PRESETS["outfit"]["white"],
    )


def create_character(
    character_id: str, build: BuildType | str, height: HeightType | str
) -> Character:
    """Create a character with no parts and the default color scheme.

    Raises:
        ValueError: If *character_id* is empty or has invalid characters.
        InvalidEnumError: If build or height is unknown.
    """
    _validate_id(character_id)
    now = _now()
    return Character(
        id=character_id,
        build=parse_enum(BuildType, build, "build type"),
        height=parse_enum(HeightType, height, "height type"),
        color_scheme=default_color_scheme(),
        created=now,
        last_modified=now,
    )


def _copy_parts(parts: Mapping[str, CharacterPart]) -> dict[str, CharacterPart]:
    return {slot: part.clone() for slot, part in parts.items()}


def equip_part(
    character: Character, slot: PartSlot | str, part: CharacterPart
) -> Character:
    """Return a copy of *character* wearing *part* in *slot*.

    Any part already in the slot is replaced.

    Raises:
        InvalidEnumError: If *slot* is not a body slot.
        ValueError: If the part was made for a different slot.
    """
    slot = parse_enum(PartSlot, slot, "part slot")
    if part.slot != slot.value:
        raise ValueError(
            f'Part slot mismatch: part is for slot "{part.slot}" '
            f'but trying to equip to "{slot.value}"'
        )
    parts = _copy_parts(character.equipped_parts)
    parts[slot.value] = part.clone()
    logger.debug("Equipped %s to %s on %s", part.id, slot.value, character.id)
    return dataclasses.replace(
        character,
        equipped_parts=parts,
        color_scheme=character.color_scheme.model_copy(deep=True),
        last_modified=_now(),
    )


def unequip_part(character: Character, slot: PartSlot | str) -> Character:
    """Return a copy of *character* with *slot* emptied (no-op if already empty)."""
    key = slot.value if isinstance(slot, PartSlot) else slot
    parts = _copy_parts(character.equipped_parts)
    parts.pop(key, None)
    return dataclasses.replace(
        character,
        equipped_parts=parts,
        color_scheme=character.color_scheme.model_copy(deep=True),
        last_modified=_now(),
    )


def set_character_colors(
    character: Character,
    skin: Color | None = None,
    hair: Color | None = None,
    eyes: Color | None = None,
    outfit_primary: Color | None = None,
    outfit_secondary: Color | None = None,
) -> Character:
    """Return a copy with the given base colors replaced.

    Omitted colors keep their current primary; shadows and highlights are
    derived again for every entry.
    """
    current = character.color_scheme
    scheme = create_color_scheme(
        skin or current.skin.primary,
        hair or current.hair.primary,
        eyes or current.eyes,
        outfit_primary or current.outfit_primary.primary,
        outfit_secondary or current.outfit_secondary.primary,
    )
    return dataclasses.replace(
        character,
        color_scheme=scheme,
        equipped_parts=_copy_parts(character.equipped_parts),
        last_modified=_now(),
    )


def save_character(character: Character) -> str:
    """Serialize *character* to indented JSON with camelCase keys."""
    record = CharacterRecord(
        id=character.id,
        build=character.build,
        height=character.height,
        equipped_parts={
            slot: PartRecord.from_part(part)
            for slot, part in character.equipped_parts.items()
        },
        color_scheme=character.color_scheme,
        created=character.created,
        last_modified=character.last_modified,
    )
    return record.model_dump_json(by_alias=True, indent=2)


def load_character(text: str | bytes) -> Character:
    """Parse JSON produced by :func:`save_character`.

    Raises:
        MalformedMetadataError: If the JSON is invalid, fields are missing
            or of the wrong type, or a part is stored under a slot it was
            not made for.
        BufferSizeMismatchError: If a part's byte list has the wrong length.
    """
    try:
        record = CharacterRecord.model_validate_json(text)
    except ValidationError as exc:
        raise MalformedMetadataError(f"Invalid character data: {exc}") from exc

    slots = {s.value for s in PartSlot}
    for key, part in record.equipped_parts.items():
        if key not in slots:
            raise MalformedMetadataError(f"Unknown equipped slot {key!r}")
        if part.slot != key:
            raise MalformedMetadataError(
                f"Part {part.id!r} is for slot {part.slot!r} but stored under {key!r}"
            )

    return Character(
        id=record.id,
        build=record.build,
        height=record.height,
        color_scheme=record.color_scheme,
        equipped_parts={
            slot: part.to_part() for slot, part in record.equipped_parts.items()
        },
        created=record.created,
        last_modified=record.last_modified,
    )


def render_character(
    character: Character,
    direction: ViewDirection | str = ViewDirection.FRONT,
    z_order: Mapping[str, int] = PART_Z_ORDER,
) -> AssembledCharacter:
    """Draw the character's base body and assemble its parts onto it."""
    body = create_base_body(character.build, character.height, direction)
    return assemble_character(
        body, character.equipped_parts, character.color_scheme, direction, z_order
    )
