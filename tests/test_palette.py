"""Tests for charforge.palette — presets, extraction and remapping."""

from __future__ import annotations

import json

import pytest

from charforge.canvas import create_canvas
from charforge.draw import get_pixel, set_pixel
from charforge.errors import MalformedMetadataError
from charforge.models import TRANSPARENT, Color
from charforge.palette import (
    PRESET_PALETTES,
    Palette,
    extract_palette,
    palette_from_json,
    palette_to_json,
    remap_to_palette,
)

from conftest import BLUE, RED


class TestPresets:
    """Tests for the built-in palettes."""

    def test_known_presets(self) -> None:
        assert set(PRESET_PALETTES) == {"gameboy", "pico8", "nes", "endesga32"}

    def test_preset_sizes(self) -> None:
        assert len(PRESET_PALETTES["gameboy"].colors) == 4
        assert len(PRESET_PALETTES["pico8"].colors) == 16
        assert len(PRESET_PALETTES["endesga32"].colors) == 32

    def test_presets_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            PRESET_PALETTES["mine"] = Palette(name="mine")  # type: ignore[index]


class TestExtractPalette:
    """Tests for extract_palette."""

    def test_first_seen_order(self) -> None:
        canvas = create_canvas(3, 1)
        set_pixel(canvas, 0, 0, BLUE)
        set_pixel(canvas, 1, 0, RED)
        set_pixel(canvas, 2, 0, BLUE)
        assert extract_palette(canvas) == [BLUE, RED]

    def test_transparent_counts_as_color(self) -> None:
        canvas = create_canvas(2, 1)
        set_pixel(canvas, 1, 0, RED)
        assert extract_palette(canvas) == [TRANSPARENT, RED]


class TestRemapToPalette:
    """Tests for nearest-color remapping."""

    def test_maps_to_nearest(self) -> None:
        canvas = create_canvas(2, 1)
        set_pixel(canvas, 0, 0, Color(r=250, g=10, b=10))
        set_pixel(canvas, 1, 0, Color(r=10, g=10, b=240, a=100))
        result = remap_to_palette(canvas, [RED, BLUE])
        assert get_pixel(result, 0, 0) == RED
        assert get_pixel(result, 1, 0) == Color(r=0, g=0, b=255, a=100)

    def test_alpha_preserved(self) -> None:
        canvas = create_canvas(1, 1)
        set_pixel(canvas, 0, 0, Color(r=200, g=0, b=0, a=7))
        result = remap_to_palette(canvas, [RED])
        assert get_pixel(result, 0, 0).a == 7

    def test_empty_palette_copies(self) -> None:
        canvas = create_canvas(1, 1)
        set_pixel(canvas, 0, 0, RED)
        result = remap_to_palette(canvas, [])
        assert result.buffer == canvas.buffer
        assert result.buffer is not canvas.buffer

    def test_source_unchanged(self) -> None:
        canvas = create_canvas(1, 1)
        set_pixel(canvas, 0, 0, Color(r=250, g=10, b=10))
        remap_to_palette(canvas, [RED])
        assert get_pixel(canvas, 0, 0) == Color(r=250, g=10, b=10)


class TestPaletteJson:
    """Tests for palette JSON conversion."""

    def test_colors_as_arrays(self) -> None:
        data = json.loads(palette_to_json(Palette(name="two", colors=[RED, BLUE])))
        assert data == {"name": "two", "colors": [[255, 0, 0, 255], [0, 0, 255, 255]]}

    def test_parse(self) -> None:
        palette = palette_from_json('{"name": "p", "colors": [[1, 2, 3, 4]]}')
        assert palette.name == "p"
        assert palette.colors == [Color(r=1, g=2, b=3, a=4)]

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            '{"colors": []}',
            '{"name": "p", "colors": {}}',
            '{"name": "p", "colors": [[1, 2, 3]]}',
            '{"name": "p", "colors": [[1, 2, 3, 300]]}',
        ],
    )
    def test_malformed(self, text: str) -> None:
        with pytest.raises(MalformedMetadataError):
            palette_from_json(text)
