"""Tests for charforge.character.template — templates and anchors."""

from __future__ import annotations

import pytest

from charforge.character.template import (
    create_body_template,
    find_anchor_for_slot,
    load_template,
    validate_template,
)
from charforge.constants import REQUIRED_SLOTS
from charforge.errors import TemplateInvalidError
from charforge.models import AnchorPoint


class TestCreateBodyTemplate:
    """Tests for proportional template construction."""

    def test_anchor_positions(self) -> None:
        template = create_body_template("chibi", 32, 48, "chibi")
        assert template.anchors.torso == [AnchorPoint(x=16, y=24, slot="torso")]
        assert template.anchors.legs == [AnchorPoint(x=16, y=36, slot="legs")]
        assert find_anchor_for_slot(template, "eyes") == AnchorPoint(x=12, y=12, slot="eyes")
        assert find_anchor_for_slot(template, "feet-right") == AnchorPoint(
            x=20, y=44, slot="feet-right"
        )

    def test_two_eye_and_ear_anchors(self) -> None:
        template = create_body_template("t", 32, 48, "chibi")
        slots = [a.slot for a in template.anchors.head]
        assert slots.count("eyes") == 2
        assert slots.count("ears") == 2

    def test_default_template_is_valid(self) -> None:
        validate_template(create_body_template("t", 32, 48, "chibi"))

    @pytest.mark.parametrize("width,height", [(0, 48), (32, 0), (-1, -1)])
    def test_bad_dimensions(self, width: int, height: int) -> None:
        with pytest.raises(TemplateInvalidError):
            create_body_template("t", width, height, "chibi")


class TestFindAnchorForSlot:
    """Tests for anchor lookup."""

    def test_missing_slot(self) -> None:
        template = create_body_template("t", 32, 48, "chibi")
        assert find_anchor_for_slot(template, "weapon-main") is None

    def test_returns_copy(self) -> None:
        template = create_body_template("t", 32, 48, "chibi")
        anchor = find_anchor_for_slot(template, "torso")
        assert anchor is not None
        anchor.x = 0
        assert template.anchors.torso[0].x == 16


class TestValidateTemplate:
    """Tests for template validation."""

    def test_anchor_out_of_bounds(self) -> None:
        template = create_body_template("t", 32, 48, "chibi")
        template.anchors.torso[0].x = 32
        with pytest.raises(TemplateInvalidError, match="outside"):
            validate_template(template)

    def test_missing_required_slot(self) -> None:
        template = create_body_template("t", 32, 48, "chibi")
        template.anchors.feet = []
        with pytest.raises(TemplateInvalidError, match="feet-left"):
            validate_template(template)

    def test_custom_required_slots(self) -> None:
        template = create_body_template("t", 32, 48, "chibi")
        template.anchors.feet = []
        validate_template(template, required_slots=["torso"])

    def test_required_slots_cover_every_part_slot(self) -> None:
        assert len(REQUIRED_SLOTS) == 12


class TestLoadTemplate:
    """Tests for loading templates from mappings."""

    def test_round_trip_through_dump(self) -> None:
        template = create_body_template("t", 32, 48, "chibi")
        assert load_template(template.model_dump()) == template

    def test_bad_structure(self) -> None:
        with pytest.raises(TemplateInvalidError, match="structure"):
            load_template({"id": "t", "width": "wide"})

    def test_invalid_contents(self) -> None:
        data = create_body_template("t", 32, 48, "chibi").model_dump()
        data["anchors"]["head"] = []
        with pytest.raises(TemplateInvalidError):
            load_template(data)
