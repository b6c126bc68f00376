"""Procedurally drawn base bodies."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping

from charforge.canvas import Canvas, create_canvas
from charforge.constants import BODY_HEIGHT, BODY_WIDTH, BUILD_FACTORS, HEIGHT_FACTORS
from charforge.draw import draw_circle, draw_rect, set_pixel
from charforge.logging import get_logger
from charforge.models import BuildType, Color, HeightType, ViewDirection, parse_enum

logger = get_logger("body")

SKIN = Color(r=255, g=213, b=160)
OUTLINE = Color(r=80, g=60, b=40)
SKIN_SHADOW = Color(r=230, g=190, b=140)

_CENTER_X = BODY_WIDTH // 2


@dataclass
class BaseBodySprite(Canvas):
    """The fixed, never-recolored body every character is built on.

    Attributes:
        build: Body build the sprite was drawn for.
        height_type: Body height the sprite was drawn for.
        direction: View direction the sprite faces.
    """

    build: BuildType = BuildType.NORMAL
    height_type: HeightType = HeightType.AVERAGE
    direction: ViewDirection = ViewDirection.FRONT

    def clone(self) -> "BaseBodySprite":
        return BaseBodySprite(
            width=self.width,
            height=self.height,
            buffer=bytearray(self.buffer),
            build=self.build,
            height_type=self.height_type,
            direction=self.direction,
        )


def _outlined_rect(canvas: Canvas, x0: int, y0: int, x1: int, y1: int) -> None:
    draw_rect(canvas, x0, y0, x1, y1, SKIN, filled=True)
    draw_rect(canvas, x0, y0, x1, y1, OUTLINE)


def _draw_head(canvas: Canvas, bf: float, hf: float, direction: ViewDirection) -> None:
    head_y = math.floor(12 / hf)
    radius = math.floor(8 * bf)
    draw_circle(canvas, _CENTER_X, head_y, radius, SKIN, filled=True)
    draw_circle(canvas, _CENTER_X, head_y, radius, OUTLINE)

    if direction is ViewDirection.BACK:
        return
    # Cheek shading on the side turned away from the light.
    for i in range(math.floor(radius * 0.6)):
        x = _CENTER_X + 2 + i
        if canvas.in_bounds(x, head_y + 2):
            set_pixel(canvas, x, head_y + 2, SKIN_SHADOW)


def _draw_torso(canvas: Canvas, bf: float, hf: float) -> None:
    torso_y = math.floor(24 / hf)
    half_width = math.floor(10 * bf) // 2
    half_height = math.floor(12 * hf) // 2
    _outlined_rect(
        canvas,
        _CENTER_X - half_width,
        torso_y - half_height,
        _CENTER_X + half_width,
        torso_y + half_height,
    )


def _draw_legs(canvas: Canvas, bf: float, hf: float) -> None:
    legs_y = math.floor(36 / hf)
    leg_width = math.floor(4 * bf)
    leg_height = math.floor(8 * hf)
    spacing = math.floor(3 * bf)
    bottom = min(legs_y + leg_height, canvas.height - 1)
    _outlined_rect(canvas, _CENTER_X - spacing - leg_width, legs_y, _CENTER_X - spacing, bottom)
    _outlined_rect(canvas, _CENTER_X + spacing, legs_y, _CENTER_X + spacing + leg_width, bottom)


def _draw_arms(canvas: Canvas, bf: float, hf: float, direction: ViewDirection) -> None:
    arm_y = math.floor(24 / hf)
    arm_width = math.floor(3 * bf)
    half_height = math.floor(8 * hf) // 2
    distance = math.floor(8 * bf)
    top, bottom = arm_y - half_height, arm_y + half_height

    # In profile only the near arm is visible.
    if direction is not ViewDirection.RIGHT:
        _outlined_rect(canvas, _CENTER_X - distance - arm_width, top, _CENTER_X - distance, bottom)
    if direction is not ViewDirection.LEFT:
        _outlined_rect(canvas, _CENTER_X + distance, top, _CENTER_X + distance + arm_width, bottom)


def create_base_body(
    build: BuildType | str,
    height: HeightType | str,
    direction: ViewDirection | str = ViewDirection.FRONT,
    build_factors: Mapping[str, float] = BUILD_FACTORS,
    height_factors: Mapping[str, float] = HEIGHT_FACTORS,
) -> BaseBodySprite:
    """Draw a 32x48 chibi body scaled for *build* and *height*.

    The head is a filled, outlined circle; torso, legs and arms are
    outlined rectangles.  Build widens the figure and height moves the
    features vertically.

    Args:
        build: ``skinny``, ``normal`` or ``muscular``.
        height: ``short``, ``average`` or ``tall``.
        direction: View direction.  The back view has no face shading;
            profile views draw only the near arm.
        build_factors: Width scale per build.
        height_factors: Vertical scale per height.

    Returns:
        A new base body sprite.

    Raises:
        InvalidEnumError: If build, height or direction is unknown.
    """
    build = parse_enum(BuildType, build, "build type")
    height = parse_enum(HeightType, height, "height type")
    direction = parse_enum(ViewDirection, direction, "view direction")
    bf = build_factors[build.value]
    hf = height_factors[height.value]

    canvas = create_canvas(BODY_WIDTH, BODY_HEIGHT)
    _draw_head(canvas, bf, hf, direction)
    _draw_torso(canvas, bf, hf)
    _draw_legs(canvas, bf, hf)
    _draw_arms(canvas, bf, hf, direction)

    logger.debug("Created %s/%s base body facing %s", build.value, height.value, direction.value)
    return BaseBodySprite(
        width=canvas.width,
        height=canvas.height,
        buffer=canvas.buffer,
        build=build,
        height_type=height,
        direction=direction,
    )
