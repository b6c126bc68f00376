"""Character assembly: anchor placement, z-ordering and binary-alpha compositing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, NamedTuple

from charforge.canvas import Canvas, create_canvas
from charforge.character.body import BaseBodySprite
from charforge.character.parts import CharacterPart
from charforge.character.recolor import apply_color_scheme, color_category_for_slot
from charforge.character.template import create_body_template, find_anchor_for_slot
from charforge.constants import (
    BASE_BODY_SLOT,
    BINARY_ALPHA_THRESHOLD,
    DEFAULT_Z_ORDER,
    PART_Z_ORDER,
    TEMPLATE_STYLE,
)
from charforge.logging import get_logger
from charforge.models import ColorScheme, ViewDirection, parse_enum

logger = get_logger("assembly")


@dataclass
class AssembledCharacter(Canvas):
    """A flattened character image plus the inputs it was built from."""

    base_body: BaseBodySprite | None = None
    equipped_parts: dict[str, CharacterPart] = field(default_factory=dict)
    color_scheme: ColorScheme | None = None
    direction: ViewDirection = ViewDirection.FRONT

    def clone(self) -> "AssembledCharacter":
        return AssembledCharacter(
            width=self.width,
            height=self.height,
            buffer=bytearray(self.buffer),
            base_body=None if self.base_body is None else self.base_body.clone(),
            equipped_parts={s: p.clone() for s, p in self.equipped_parts.items()},
            color_scheme=(
                None if self.color_scheme is None else self.color_scheme.model_copy(deep=True)
            ),
            direction=self.direction,
        )


class _RenderEntry(NamedTuple):
    sprite: Canvas
    slot: str
    z_order: int
    x: int
    y: int


def composite_binary_alpha(canvas: Canvas, sprite: Canvas, left: int, top: int) -> None:
    """Stamp *sprite* onto *canvas* with its top-left corner at ``(left, top)``.

    Source pixels with alpha at or above the threshold are written fully
    opaque; everything else is skipped.  Pixels that land outside the
    canvas are clipped.
    """
    src = sprite.buffer
    dst = canvas.buffer
    for y in range(sprite.height):
        ty = top + y
        if not 0 <= ty < canvas.height:
            continue
        for x in range(sprite.width):
            tx = left + x
            if not 0 <= tx < canvas.width:
                continue
            so = sprite.offset(x, y)
            if src[so + 3] < BINARY_ALPHA_THRESHOLD:
                continue
            do = canvas.offset(tx, ty)
            dst[do : do + 3] = src[so : so + 3]
            dst[do + 3] = 255


def assemble_character(
    base_body: BaseBodySprite,
    equipped_parts: Mapping[str, CharacterPart],
    color_scheme: ColorScheme,
    direction: ViewDirection | str = ViewDirection.FRONT,
    z_order: Mapping[str, int] = PART_Z_ORDER,
) -> AssembledCharacter:
    """Composite a base body and its equipped parts into one image.

    Parts are centered on the first anchor of their slot in a chibi
    template sized to the body.  Slots without an anchor are dropped.
    Entries are painted in ascending z-order (ties keep insertion order)
    and every part is recolored from *color_scheme* before painting.

    Args:
        base_body: Body drawn at the origin.
        equipped_parts: Parts keyed by the slot they are equipped to.
        color_scheme: Colors applied to each part.
        direction: View direction recorded on the result.
        z_order: Paint order per slot; unknown slots use the default.

    Returns:
        An :class:`AssembledCharacter` whose pixels are all alpha 0 or 255.

    Raises:
        InvalidEnumError: If *direction* is unknown.
    """
    direction = parse_enum(ViewDirection, direction, "view direction")
    canvas = create_canvas(base_body.width, base_body.height)
    template = create_body_template(
        "assembly", base_body.width, base_body.height, TEMPLATE_STYLE
    )

    entries = [
        _RenderEntry(
            base_body, BASE_BODY_SLOT, z_order.get(BASE_BODY_SLOT, DEFAULT_Z_ORDER), 0, 0
        )
    ]
    for slot, part in equipped_parts.items():
        anchor = find_anchor_for_slot(template, slot)
        if anchor is None:
            logger.debug("No anchor for slot %r; skipping part %s", slot, part.id)
            continue
        entries.append(
            _RenderEntry(
                part,
                slot,
                z_order.get(slot, DEFAULT_Z_ORDER),
                anchor.x - part.width // 2,
                anchor.y - part.height // 2,
            )
        )

    # sorted() is stable, so equal z-orders keep insertion order.
    for entry in sorted(entries, key=lambda e: e.z_order):
        sprite = entry.sprite
        if isinstance(sprite, CharacterPart):
            sprite = apply_color_scheme(
                sprite, color_scheme, color_category_for_slot(entry.slot)
            )
        composite_binary_alpha(canvas, sprite, entry.x, entry.y)

    return AssembledCharacter(
        width=canvas.width,
        height=canvas.height,
        buffer=canvas.buffer,
        base_body=base_body.clone(),
        equipped_parts={slot: part.clone() for slot, part in equipped_parts.items()},
        color_scheme=color_scheme.model_copy(deep=True),
        direction=direction,
    )
