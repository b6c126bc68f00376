"""Tests for charforge.character.assembly — placing and compositing parts."""

from __future__ import annotations

import pytest

from charforge.canvas import create_canvas
from charforge.character.assembly import (
    AssembledCharacter,
    assemble_character,
    composite_binary_alpha,
)
from charforge.character.body import BaseBodySprite, create_base_body
from charforge.character.parts import (
    CharacterPart,
    EyeStyle,
    HairStyle,
    TorsoStyle,
    create_eye_part,
    create_hair_part,
    create_torso_part,
)
from charforge.character.recolor import create_color_scheme
from charforge.draw import get_pixel, set_pixel
from charforge.errors import InvalidEnumError
from charforge.models import BuildType, Color, ColorScheme, HeightType, ViewDirection

from conftest import BLUE, GREEN, RED, WHITE


@pytest.fixture()
def body() -> BaseBodySprite:
    return create_base_body("normal", "average")


@pytest.fixture()
def scheme() -> ColorScheme:
    return create_color_scheme(
        RED, GREEN, BLUE, Color(r=10, g=20, b=30), Color(r=40, g=50, b=60)
    )


def _solid(slot: str, color: Color) -> CharacterPart:
    """A 4x4 non-colorable part filled with *color*."""
    canvas = create_canvas(4, 4)
    for y in range(4):
        for x in range(4):
            set_pixel(canvas, x, y, color)
    return CharacterPart(
        width=4, height=4, buffer=canvas.buffer, id=f"{slot}-solid", slot=slot, colorable=False
    )


def _as_slot(part: CharacterPart, slot: str) -> CharacterPart:
    moved = part.clone()
    moved.slot = slot
    return moved


class TestCompositeBinaryAlpha:
    """Tests for threshold stamping."""

    def test_threshold(self) -> None:
        canvas = create_canvas(2, 1)
        sprite = create_canvas(2, 1)
        set_pixel(sprite, 0, 0, (10, 20, 30, 127))
        set_pixel(sprite, 1, 0, (10, 20, 30, 128))
        composite_binary_alpha(canvas, sprite, 0, 0)
        assert get_pixel(canvas, 0, 0).a == 0
        assert get_pixel(canvas, 1, 0) == Color(r=10, g=20, b=30, a=255)

    def test_clipped_at_edges(self) -> None:
        canvas = create_canvas(2, 2)
        sprite = create_canvas(2, 2)
        for y in range(2):
            for x in range(2):
                set_pixel(sprite, x, y, RED)
        composite_binary_alpha(canvas, sprite, -1, -1)
        assert get_pixel(canvas, 0, 0) == RED
        assert get_pixel(canvas, 1, 1).a == 0


class TestAssembleCharacter:
    """Tests for assemble_character."""

    def test_body_only(self, body: BaseBodySprite, scheme: ColorScheme) -> None:
        result = assemble_character(body, {}, scheme)
        assert isinstance(result, AssembledCharacter)
        assert result.size == body.size
        assert result.buffer == body.buffer

    def test_alpha_is_binary(self, body: BaseBodySprite, scheme: ColorScheme) -> None:
        parts = {"hair-front": create_hair_part("curly")}
        result = assemble_character(body, parts, scheme)
        assert set(result.buffer[3::4]) <= {0, 255}

    @pytest.mark.parametrize("direction", [d.value for d in ViewDirection])
    @pytest.mark.parametrize("height", [h.value for h in HeightType])
    @pytest.mark.parametrize("build", [b.value for b in BuildType])
    def test_alpha_is_binary_for_every_body_and_style(
        self, build: str, height: str, direction: str, scheme: ColorScheme
    ) -> None:
        """Every body, view and part style assembles to alpha 0 or 255 only."""
        body = create_base_body(build, height, direction)
        faded = create_color_scheme(
            Color(r=200, g=150, b=100, a=100), RED, BLUE, GREEN, Color(r=1, g=2, b=3, a=128)
        )
        for hair, eyes, torso in zip(HairStyle, EyeStyle, TorsoStyle):
            parts = {
                "hair-front": create_hair_part(hair, direction),
                "eyes": create_eye_part(eyes, direction),
                "torso": create_torso_part(torso, direction),
                "hair-back": _as_slot(create_hair_part(hair, direction), "hair-back"),
            }
            for colors in (scheme, faded):
                result = assemble_character(body, parts, colors, direction)
                assert set(result.buffer[3::4]) <= {0, 255}

    def test_part_centered_on_anchor_and_recolored(
        self, body: BaseBodySprite, solid_part: CharacterPart, scheme: ColorScheme
    ) -> None:
        """A 4x4 torso part lands at (14, 22) in outfit-primary."""
        result = assemble_character(body, {"torso": solid_part}, scheme)
        expected = scheme.outfit_primary.primary
        assert get_pixel(result, 14, 22) == expected
        assert get_pixel(result, 17, 25) == expected
        assert get_pixel(result, 18, 26) != expected

    def test_hair_back_behind_body(
        self, body: BaseBodySprite, solid_part: CharacterPart, scheme: ColorScheme
    ) -> None:
        """Low z-order parts are hidden where the body is drawn."""
        part = _as_slot(solid_part, "hair-back")
        result = assemble_character(body, {"hair-back": part}, scheme)
        assert get_pixel(result, 10, 8) == get_pixel(body, 10, 8)

    def test_hair_front_over_body(
        self, body: BaseBodySprite, solid_part: CharacterPart, scheme: ColorScheme
    ) -> None:
        part = _as_slot(solid_part, "hair-front")
        result = assemble_character(body, {"hair-front": part}, scheme)
        assert get_pixel(result, 10, 10) == scheme.hair.primary

    def test_injected_z_order(
        self, body: BaseBodySprite, solid_part: CharacterPart, scheme: ColorScheme
    ) -> None:
        part = _as_slot(solid_part, "hair-back")
        result = assemble_character(
            body, {"hair-back": part}, scheme, z_order={"base-body": 0, "hair-back": 10}
        )
        assert get_pixel(result, 10, 8) == scheme.hair.primary

    def test_slot_without_anchor_dropped(
        self, body: BaseBodySprite, solid_part: CharacterPart, scheme: ColorScheme
    ) -> None:
        part = _as_slot(solid_part, "weapon-main")
        result = assemble_character(body, {"weapon-main": part}, scheme)
        assert result.buffer == body.buffer
        assert "weapon-main" in result.equipped_parts

    def test_equal_z_order_keeps_insertion_order(
        self, body: BaseBodySprite, scheme: ColorScheme
    ) -> None:
        """Ties paint in the order parts were given, so the later one wins."""
        nose = _solid("nose", RED)
        mouth = _solid("mouth", BLUE)
        z_order = {"base-body": 0, "nose": 5, "mouth": 5}

        # nose spans rows 12..15 and mouth rows 14..17 around x 14..17.
        result = assemble_character(body, {"nose": nose, "mouth": mouth}, scheme, z_order=z_order)
        assert get_pixel(result, 15, 14) == BLUE
        result = assemble_character(body, {"mouth": mouth, "nose": nose}, scheme, z_order=z_order)
        assert get_pixel(result, 15, 14) == RED

    def test_non_colorable_part_keeps_colors(
        self, body: BaseBodySprite, solid_part: CharacterPart, scheme: ColorScheme
    ) -> None:
        solid_part.colorable = False
        result = assemble_character(body, {"torso": solid_part}, scheme)
        assert get_pixel(result, 14, 22) == WHITE

    def test_result_is_independent(
        self, body: BaseBodySprite, solid_part: CharacterPart, scheme: ColorScheme
    ) -> None:
        before_body = bytearray(body.buffer)
        before_part = bytearray(solid_part.buffer)
        result = assemble_character(body, {"torso": solid_part}, scheme, "left")

        assert body.buffer == before_body
        assert solid_part.buffer == before_part
        assert result.direction is ViewDirection.LEFT
        result.base_body.buffer[0] = 7  # type: ignore[union-attr]
        result.equipped_parts["torso"].buffer[0] = 7
        assert body.buffer[0] == before_body[0]
        assert solid_part.buffer[0] == before_part[0]

    def test_clone(self, body: BaseBodySprite, scheme: ColorScheme) -> None:
        result = assemble_character(body, {}, scheme)
        copy = result.clone()
        copy.buffer[0] = 1
        assert result.buffer[0] == body.buffer[0]
        assert copy.base_body is not result.base_body
        assert copy.color_scheme == result.color_scheme
        assert copy.color_scheme is not result.color_scheme
        assert copy.color_scheme.skin is not result.color_scheme.skin  # type: ignore[union-attr]

    def test_invalid_direction(self, body: BaseBodySprite, scheme: ColorScheme) -> None:
        with pytest.raises(InvalidEnumError):
            assemble_character(body, {}, scheme, "sideways")
