"""Body templates and anchor point resolution."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from charforge.constants import REQUIRED_SLOTS
from charforge.errors import TemplateInvalidError
from charforge.models import AnchorPoint, BodyTemplate, PartSlot, TemplateAnchors


def create_body_template(id: str, width: int, height: int, style: str) -> BodyTemplate:
    """Create a template with anchors placed proportionally to its size.

    The head center sits at ``(w//2, h//4)``, the torso at ``(w//2, h//2)``
    and the legs at ``(w//2, 3h//4)``.  Face, hair, arm and foot anchors
    are fixed pixel offsets from those centers.  Both eyes and both ears
    get an anchor each.

    Raises:
        TemplateInvalidError: If either dimension is not positive.
    """
    if width <= 0 or height <= 0:
        raise TemplateInvalidError(
            "Invalid template dimensions: width and height must be positive"
        )

    head_x, head_y = width // 2, height // 4
    torso_x, torso_y = width // 2, height // 2
    legs_x, legs_y = width // 2, (height * 3) // 4

    def anchor(x: int, y: int, slot: PartSlot) -> AnchorPoint:
        return AnchorPoint(x=x, y=y, slot=slot.value)

    return BodyTemplate(
        id=id,
        width=width,
        height=height,
        style=style,
        anchors=TemplateAnchors(
            head=[
                anchor(head_x - 6, head_y - 4, PartSlot.HAIR_BACK),
                anchor(head_x - 4, head_y, PartSlot.EYES),
                anchor(head_x + 4, head_y, PartSlot.EYES),
                anchor(head_x, head_y + 2, PartSlot.NOSE),
                anchor(head_x, head_y + 4, PartSlot.MOUTH),
                anchor(head_x - 8, head_y, PartSlot.EARS),
                anchor(head_x + 8, head_y, PartSlot.EARS),
                anchor(head_x - 6, head_y - 2, PartSlot.HAIR_FRONT),
            ],
            torso=[anchor(torso_x, torso_y, PartSlot.TORSO)],
            legs=[anchor(legs_x, legs_y, PartSlot.LEGS)],
            arms=[
                anchor(torso_x - 10, torso_y, PartSlot.ARMS_LEFT),
                anchor(torso_x + 10, torso_y, PartSlot.ARMS_RIGHT),
            ],
            feet=[
                anchor(legs_x - 4, height - 4, PartSlot.FEET_LEFT),
                anchor(legs_x + 4, height - 4, PartSlot.FEET_RIGHT),
            ],
        ),
    )


def find_anchor_for_slot(template: BodyTemplate, slot: str) -> AnchorPoint | None:
    """Return the first anchor for *slot* across all groups, or ``None``.

    Groups are searched head, torso, legs, arms, feet.  Slots with two
    anchors (eyes, ears) resolve to the first one; a single part carries
    the artwork for both sides.
    """
    for anchor in template.anchors.flatten():
        if anchor.slot == slot:
            return anchor.model_copy()
    return None


def validate_template(
    template: BodyTemplate, required_slots: Iterable[str] = REQUIRED_SLOTS
) -> None:
    """Check dimensions, anchor bounds, and required slot coverage.

    Raises:
        TemplateInvalidError: On the first problem found.
    """
    if template.width <= 0 or template.height <= 0:
        raise TemplateInvalidError(
            "Invalid template dimensions: width and height must be positive"
        )

    anchors = template.anchors.flatten()
    for anchor in anchors:
        if not (0 <= anchor.x < template.width and 0 <= anchor.y < template.height):
            raise TemplateInvalidError(
                f"Anchor point outside canvas bounds: ({anchor.x}, {anchor.y}) "
                f"for {template.width}x{template.height} template"
            )

    available = {anchor.slot for anchor in anchors}
    for slot in required_slots:
        if slot not in available:
            raise TemplateInvalidError(f"Missing required slot: {slot}")


def load_template(data: Mapping[str, Any]) -> BodyTemplate:
    """Validate a JSON-style mapping into a checked :class:`BodyTemplate`.

    Raises:
        TemplateInvalidError: If the structure is wrong or
            :func:`validate_template` rejects it.
    """
    try:
        template = BodyTemplate.model_validate(data)
    except ValidationError as exc:
        raise TemplateInvalidError(f"Invalid template data structure: {exc}") from exc
    validate_template(template)
    return template
