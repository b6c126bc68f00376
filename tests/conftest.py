"""Shared fixtures for charforge tests."""

from __future__ import annotations

import logging
import textwrap
from pathlib import Path
from typing import Iterator

import pytest

from charforge.canvas import Canvas, create_canvas
from charforge.character.parts import CharacterPart, ColorRegions
from charforge.draw import set_pixel
from charforge.models import Color

RED = Color(r=255, g=0, b=0)
GREEN = Color(r=0, g=255, b=0)
BLUE = Color(r=0, g=0, b=255)
WHITE = Color(r=255, g=255, b=255)


@pytest.fixture(autouse=True)
def _reset_charforge_logger() -> Iterator[None]:
    """Leave the charforge logger without handlers between tests."""
    yield
    logger = logging.getLogger("charforge")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def canvas_4x4() -> Canvas:
    """A transparent 4x4 canvas."""
    return create_canvas(4, 4)


@pytest.fixture()
def solid_part() -> CharacterPart:
    """A 4x4 fully opaque white torso part whose pixels are all primary."""
    canvas = create_canvas(4, 4)
    for y in range(4):
        for x in range(4):
            set_pixel(canvas, x, y, WHITE)
    return CharacterPart(
        width=4,
        height=4,
        buffer=canvas.buffer,
        id="torso-test",
        slot="torso",
        color_regions=ColorRegions(
            primary=[(x, y) for y in range(4) for x in range(4)],
        ),
    )


@pytest.fixture()
def recipe_file(tmp_path: Path) -> Path:
    """A complete, valid recipe YAML on disk."""
    path = tmp_path / "hero.yaml"
    path.write_text(textwrap.dedent("""\
        character:
          id: hero
          build: normal
          height: average
        parts:
          hair-front: {kind: hair, style: spiky}
          eyes: {kind: eyes, style: round}
          torso: {kind: torso, style: armor}
        colors:
          skin: "#f1c27d"
          hair: "#654321"
          eyes: "#4a7abc"
          outfit_primary: "#3366cc"
          outfit_secondary: "#f0f0f0"
        views: [front, back]
        sheet:
          layout: strip-horizontal
          padding: 1
        output_path: output/hero
        """))
    return path
