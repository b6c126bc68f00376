"""On-disk persistence for layered sprites, packed sheets and characters.

A layered sprite saved under a base path ``out/hero`` occupies::

    out/hero.meta.json      # size plus per-layer settings
    out/hero.layer-0.png    # one PNG per layer, bottom first
    out/hero.layer-1.png
    out/hero.png            # flattened preview

Every file is written atomically: the data goes to a temp file in the
destination directory which then replaces the target.
"""

from __future__ import annotations

import os
import re
import threading
from pathlib import Path

from pydantic import ValidationError

from charforge.canvas import Canvas
from charforge.character.character import Character, load_character, save_character
from charforge.composite import flatten_layers
from charforge.errors import BufferSizeMismatchError, MalformedMetadataError
from charforge.image_io import canvas_to_png_bytes, read_png
from charforge.layers import Layer, LayeredCanvas
from charforge.logging import get_logger
from charforge.models import SpriteMeta
from charforge.sheet import PackedSheet, generate_tiled_metadata

logger = get_logger("storage")

_LAYER_FILE_RE = re.compile(r"\.layer-(\d+)\.png$")


def _atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write *data* to *path* through a same-directory temp file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(
        f".{path.name}.tmp-{os.getpid()}-{threading.get_ident()}"
    )
    tmp_path.write_bytes(data)
    tmp_path.replace(path)


def _atomic_write_text(path: Path, text: str) -> None:
    _atomic_write_bytes(path, text.encode("utf-8"))


def _with_suffix(base: str | Path, suffix: str) -> Path:
    # Not Path.with_suffix: base names may contain dots of their own.
    base = Path(base)
    return base.with_name(base.name + suffix)


def meta_path(base: str | Path) -> Path:
    return _with_suffix(base, ".meta.json")


def layer_path(base: str | Path, index: int) -> Path:
    return _with_suffix(base, f".layer-{index}.png")


def image_path(base: str | Path) -> Path:
    return _with_suffix(base, ".png")


# ---------------------------------------------------------------------------
# Sprite metadata
# ---------------------------------------------------------------------------


def write_meta(base: str | Path, meta: SpriteMeta) -> Path:
    """Write ``<base>.meta.json`` and return its path."""
    path = meta_path(base)
    _atomic_write_text(path, meta.model_dump_json(indent=2))
    return path


def read_meta(base: str | Path) -> SpriteMeta:
    """Load and validate ``<base>.meta.json``.

    Raises:
        FileNotFoundError: If the metadata file does not exist.
        MalformedMetadataError: If the JSON is invalid, a field is missing,
            a blend mode is unknown, an opacity is outside 0-255, or no
            layers are listed.
    """
    path = meta_path(base)
    if not path.is_file():
        raise FileNotFoundError(f"Sprite metadata not found: {path}")
    try:
        meta = SpriteMeta.model_validate_json(path.read_bytes())
    except ValidationError as exc:
        raise MalformedMetadataError(f"Invalid sprite metadata in {path}: {exc}") from exc
    if not meta.layers:
        raise MalformedMetadataError(f"Sprite metadata in {path} lists no layers")
    return meta


# ---------------------------------------------------------------------------
# Layered sprites
# ---------------------------------------------------------------------------


def _remove_stale_layers(base: Path, count: int) -> None:
    directory = base.parent
    if not directory.is_dir():
        return
    for candidate in directory.glob(f"{base.name}.layer-*.png"):
        match = _LAYER_FILE_RE.search(candidate.name)
        if match is None or candidate.name != f"{base.name}{match.group(0)}":
            continue
        if int(match.group(1)) >= count:
            candidate.unlink()
            logger.debug("Removed stale layer file %s", candidate)


def write_layered_sprite(base: str | Path, layered: LayeredCanvas) -> list[Path]:
    """Save every layer, the metadata and a flattened preview.

    Layer files left over from an earlier save with more layers are
    deleted.

    Returns:
        The written paths: metadata, layer PNGs in order, then the
        flattened image.
    """
    base = Path(base)
    meta = SpriteMeta(
        width=layered.width,
        height=layered.height,
        layers=[layer.meta() for layer in layered.layers],
    )
    written = [write_meta(base, meta)]

    for index, layer in enumerate(layered.layers):
        path = layer_path(base, index)
        canvas = _layer_canvas(layered, layer)
        _atomic_write_bytes(path, canvas_to_png_bytes(canvas))
        written.append(path)
    _remove_stale_layers(base, len(layered.layers))

    flat = image_path(base)
    _atomic_write_bytes(flat, canvas_to_png_bytes(flatten_layers(layered)))
    written.append(flat)

    logger.info(
        "Saved %dx%d sprite with %d layers to %s",
        layered.width,
        layered.height,
        len(layered.layers),
        base,
    )
    return written


def _layer_canvas(layered: LayeredCanvas, layer: Layer) -> Canvas:
    return Canvas(layered.width, layered.height, layer.buffer)


def read_layered_sprite(base: str | Path) -> LayeredCanvas:
    """Load a sprite written by :func:`write_layered_sprite`.

    Raises:
        FileNotFoundError: If the metadata or a layer PNG is missing.
        MalformedMetadataError: If the metadata is invalid.
        BufferSizeMismatchError: If a layer PNG's size differs from the
            metadata.
    """
    base = Path(base)
    meta = read_meta(base)
    layers: list[Layer] = []
    for index, info in enumerate(meta.layers):
        path = layer_path(base, index)
        try:
            canvas = read_png(path)
        except ValueError as exc:
            raise MalformedMetadataError(f"Unreadable layer image {path}") from exc
        if (canvas.width, canvas.height) != (meta.width, meta.height):
            raise BufferSizeMismatchError(
                f"Layer {index} in {path} is {canvas.width}x{canvas.height}, "
                f"expected {meta.width}x{meta.height}"
            )
        layers.append(
            Layer(
                name=info.name,
                buffer=canvas.buffer,
                opacity=info.opacity,
                visible=info.visible,
                blend=info.blend,
            )
        )
    logger.debug("Loaded %d layers from %s", len(layers), base)
    return LayeredCanvas(meta.width, meta.height, layers)


# ---------------------------------------------------------------------------
# Sprite sheets
# ---------------------------------------------------------------------------


def export_sheet(base: str | Path, packed: PackedSheet) -> dict[str, Path]:
    """Write a packed sheet as ``<base>.png``, ``<base>.json`` and ``<base>.tiled.json``.

    The Tiled file refers to the atlas image by file name, relative to
    itself.

    Returns:
        Paths keyed by ``image``, ``metadata`` and ``tiled``.

    Raises:
        ValueError: If the sheet is empty.
    """
    base = Path(base)
    png = image_path(base)
    _atomic_write_bytes(png, canvas_to_png_bytes(packed.canvas))

    metadata = _with_suffix(base, ".json")
    _atomic_write_text(metadata, packed.metadata.model_dump_json(by_alias=True, indent=2))

    tiled = generate_tiled_metadata(packed.metadata, png.name, packed.width, packed.height)
    tiled_file = _with_suffix(base, ".tiled.json")
    _atomic_write_text(tiled_file, tiled.model_dump_json(by_alias=True, indent=2))

    logger.info(
        "Exported %dx%d sheet with %d frames to %s",
        packed.width,
        packed.height,
        len(packed.metadata.frames),
        png,
    )
    return {"image": png, "metadata": metadata, "tiled": tiled_file}


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------


def save_character_file(path: str | Path, character: Character) -> Path:
    """Write *character* as JSON to *path*."""
    path = Path(path)
    _atomic_write_text(path, save_character(character))
    logger.info("Saved character %s to %s", character.id, path)
    return path


def load_character_file(path: str | Path) -> Character:
    """Read a character JSON file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        MalformedMetadataError: If the contents are not a valid character.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Character file not found: {path}")
    try:
        return load_character(path.read_bytes())
    except MalformedMetadataError as exc:
        raise MalformedMetadataError(f"{path}: {exc}") from exc
