"""Named color palettes: presets, extraction, remapping and JSON form."""

from __future__ import annotations

import json
import math
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ValidationError

from charforge.canvas import BYTES_PER_PIXEL, Canvas
from charforge.errors import MalformedMetadataError
from charforge.models import Color


class Palette(BaseModel):
    """A named, ordered list of colors."""

    name: str
    colors: list[Color] = []


def _opaque(*rgb: tuple[int, int, int]) -> list[Color]:
    return [Color(r=r, g=g, b=b) for r, g, b in rgb]


PRESET_PALETTES: Mapping[str, Palette] = MappingProxyType(
    {
        "gameboy": Palette(
            name="GameBoy",
            colors=_opaque((15, 56, 15), (48, 98, 48), (139, 172, 15), (155, 188, 15)),
        ),
        "pico8": Palette(
            name="PICO-8",
            colors=_opaque(
                (0, 0, 0), (29, 43, 83), (126, 37, 83), (0, 135, 81),
                (171, 82, 54), (95, 87, 79), (194, 195, 199), (255, 241, 232),
                (255, 0, 77), (255, 163, 0), (255, 236, 39), (0, 228, 54),
                (41, 173, 255), (131, 118, 156), (255, 119, 168), (255, 204, 170),
            ),
        ),
        "nes": Palette(
            name="NES",
            colors=_opaque(
                (84, 84, 84), (0, 30, 116), (8, 16, 144), (48, 0, 136),
                (68, 0, 100), (92, 0, 48), (84, 4, 0), (60, 24, 0),
                (32, 42, 0), (8, 58, 0), (0, 64, 0), (0, 60, 0),
                (0, 50, 60), (0, 0, 0), (152, 150, 152), (8, 76, 196),
                (48, 50, 236), (92, 30, 228), (136, 20, 176), (160, 20, 100),
                (152, 34, 32), (120, 60, 0), (84, 90, 0), (40, 114, 0),
                (8, 124, 0), (0, 118, 40), (0, 102, 120), (236, 238, 236),
                (76, 154, 236), (120, 124, 236), (176, 98, 236), (228, 84, 236),
                (236, 88, 180), (236, 106, 100), (212, 136, 32), (160, 170, 0),
                (116, 196, 0), (76, 208, 32), (56, 204, 108), (56, 180, 204),
                (60, 60, 60), (168, 204, 236), (188, 188, 236), (212, 178, 236),
                (236, 174, 236), (236, 174, 212), (236, 180, 176), (228, 196, 144),
                (204, 210, 120), (180, 222, 120), (168, 226, 144), (152, 226, 180),
                (160, 214, 228), (160, 162, 160),
            ),
        ),
        "endesga32": Palette(
            name="Endesga-32",
            colors=_opaque(
                (190, 38, 51), (224, 111, 139), (73, 60, 43), (164, 100, 34),
                (235, 137, 49), (247, 226, 107), (47, 72, 78), (68, 137, 115),
                (163, 206, 39), (27, 38, 50), (0, 87, 132), (49, 162, 242),
                (178, 220, 239), (68, 36, 52), (133, 76, 48), (254, 174, 52),
                (254, 231, 97), (99, 199, 77), (62, 137, 72), (38, 92, 66),
                (25, 60, 62), (18, 78, 137), (0, 149, 233), (44, 232, 245),
                (255, 255, 255), (192, 203, 220), (139, 155, 180), (90, 105, 136),
                (58, 68, 102), (38, 43, 68), (24, 20, 37), (255, 0, 68),
            ),
        ),
    }
)


def extract_palette(canvas: Canvas) -> list[Color]:
    """Return the distinct RGBA colors of *canvas* in first-seen order."""
    seen: dict[bytes, Color] = {}
    buf = canvas.buffer
    for o in range(0, len(buf), BYTES_PER_PIXEL):
        key = bytes(buf[o : o + BYTES_PER_PIXEL])
        if key not in seen:
            seen[key] = Color.from_rgba(tuple(key))  # type: ignore[arg-type]
    return list(seen.values())


def _nearest(rgb: tuple[int, int, int], colors: list[Color]) -> Color:
    best = colors[0]
    best_distance = math.inf
    for candidate in colors:
        distance = math.dist(rgb, (candidate.r, candidate.g, candidate.b))
        if distance < best_distance:
            best, best_distance = candidate, distance
    return best


def remap_to_palette(canvas: Canvas, colors: list[Color]) -> Canvas:
    """Map every pixel to its nearest palette color by RGB distance.

    Alpha is kept from the source pixel.  Ties go to the earlier palette
    entry.  An empty palette returns an unmodified copy.

    Args:
        canvas: Source canvas (not modified).
        colors: Target palette.

    Returns:
        A new canvas using only the palette's RGB values.
    """
    result = canvas.clone()
    if not colors:
        return result

    cache: dict[tuple[int, int, int], Color] = {}
    buf = result.buffer
    for o in range(0, len(buf), BYTES_PER_PIXEL):
        rgb = (buf[o], buf[o + 1], buf[o + 2])
        match = cache.get(rgb)
        if match is None:
            match = cache[rgb] = _nearest(rgb, colors)
        buf[o], buf[o + 1], buf[o + 2] = match.r, match.g, match.b
    return result


def palette_to_json(palette: Palette) -> str:
    """Serialize a palette with colors as ``[r, g, b, a]`` arrays."""
    return json.dumps(
        {"name": palette.name, "colors": [list(c.rgba) for c in palette.colors]}
    )


def palette_from_json(text: str) -> Palette:
    """Parse a palette produced by :func:`palette_to_json`.

    Raises:
        MalformedMetadataError: If the JSON is invalid, the name is not a
            string, or any color is not four channel values in 0–255.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedMetadataError(f"Invalid palette JSON: {exc}") from exc

    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
        raise MalformedMetadataError("Invalid palette JSON: name must be a string")
    entries = raw.get("colors")
    if not isinstance(entries, list):
        raise MalformedMetadataError("Invalid palette JSON: colors must be an array")

    colors: list[Color] = []
    for entry in entries:
        if not isinstance(entry, list) or len(entry) != 4:
            raise MalformedMetadataError(
                "Invalid palette JSON: each color must be an array of 4 numbers [r,g,b,a]"
            )
        try:
            colors.append(Color.from_rgba(tuple(entry)))  # type: ignore[arg-type]
        except ValidationError as exc:
            raise MalformedMetadataError(
                f"Invalid palette JSON: bad color {entry!r}"
            ) from exc
    return Palette(name=raw["name"], colors=colors)
