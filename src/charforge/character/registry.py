"""In-memory catalogue of reusable character parts."""

from __future__ import annotations

from charforge.character.parts import (
    CharacterPart,
    EyeStyle,
    HairStyle,
    TorsoStyle,
    create_eye_part,
    create_hair_part,
    create_torso_part,
)
from charforge.models import PartSlot, ViewDirection


class PartRegistry:
    """Parts keyed by id.

    The registry stores its own copies: registering a part and mutating
    the original afterwards does not affect the stored one, and every
    accessor hands out fresh clones.
    """

    def __init__(self) -> None:
        self._parts: dict[str, CharacterPart] = {}

    def __len__(self) -> int:
        return len(self._parts)

    def __contains__(self, part_id: object) -> bool:
        return part_id in self._parts

    def register(self, part: CharacterPart) -> None:
        """Store a copy of *part*.

        Raises:
            ValueError: If a part with the same id is already registered.
        """
        if part.id in self._parts:
            raise ValueError(f"Part with id {part.id} already exists")
        self._parts[part.id] = part.clone()

    def get(self, part_id: str) -> CharacterPart | None:
        part = self._parts.get(part_id)
        return None if part is None else part.clone()

    def list(self) -> list[CharacterPart]:
        """All parts, sorted by id."""
        return [self._parts[key].clone() for key in sorted(self._parts)]

    def by_slot(self, slot: PartSlot | str) -> list[CharacterPart]:
        key = slot.value if isinstance(slot, PartSlot) else slot
        return [part for part in self.list() if part.slot == key]

    def search(self, query: str) -> list[CharacterPart]:
        """Parts whose id contains *query*, ignoring case.

        A blank query matches nothing.
        """
        needle = query.strip().lower()
        if not needle:
            return []
        return [part for part in self.list() if needle in part.id.lower()]


def default_registry(
    direction: ViewDirection | str = ViewDirection.FRONT,
) -> PartRegistry:
    """Build a registry holding every generated hair, eye and torso style."""
    registry = PartRegistry()
    for hair in HairStyle:
        registry.register(create_hair_part(hair, direction))
    for eyes in EyeStyle:
        registry.register(create_eye_part(eyes, direction))
    for torso in TorsoStyle:
        registry.register(create_torso_part(torso, direction))
    return registry
