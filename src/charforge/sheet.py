"""Sprite sheet packing and metadata generation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from charforge.canvas import Canvas, create_canvas
from charforge.draw import get_pixel, set_pixel
from charforge.logging import get_logger
from charforge.models import FrameRect, SheetLayout, SheetMetadata, TiledMetadata, parse_enum

logger = get_logger("sheet")


@dataclass
class Frame:
    """A canvas to pack, with an optional name for the metadata."""

    canvas: Canvas
    name: str | None = None


@dataclass
class PackedSheet:
    """The packed atlas canvas and where each frame landed in it."""

    canvas: Canvas
    metadata: SheetMetadata

    @property
    def width(self) -> int:
        return self.canvas.width

    @property
    def height(self) -> int:
        return self.canvas.height


def _grid_shape(count: int, layout: SheetLayout) -> tuple[int, int]:
    if layout is SheetLayout.STRIP_HORIZONTAL:
        return count, 1
    if layout is SheetLayout.STRIP_VERTICAL:
        return 1, count
    cols = math.ceil(math.sqrt(count))
    return cols, math.ceil(count / cols)


def pack_sheet(
    frames: Sequence[Frame | Canvas],
    layout: SheetLayout | str = SheetLayout.GRID,
    padding: int = 0,
) -> PackedSheet:
    """Pack frames into one atlas on a uniform tile grid.

    The tile is the largest frame width by the largest frame height.
    Frames fill cells left-to-right then top-to-bottom, each copied to
    its cell's top-left corner.  ``padding`` pixels separate adjacent
    cells but never surround the sheet.

    Args:
        frames: Frames (or bare canvases) in packing order.
        layout: ``grid`` (``ceil(sqrt(n))`` columns), ``strip-horizontal``
            or ``strip-vertical``.
        padding: Gap between cells in pixels.

    Returns:
        The packed sheet.  No frames gives a 0x0 sheet with empty metadata.

    Raises:
        InvalidEnumError: If *layout* is unknown.
        ValueError: If *padding* is negative.
    """
    layout = parse_enum(SheetLayout, layout, "sheet layout")
    if padding < 0:
        raise ValueError(f"Padding must be non-negative, got {padding}")

    items = [f if isinstance(f, Frame) else Frame(f) for f in frames]
    if not items:
        return PackedSheet(create_canvas(0, 0), SheetMetadata())

    tile_w = max(item.canvas.width for item in items)
    tile_h = max(item.canvas.height for item in items)
    cols, rows = _grid_shape(len(items), layout)
    sheet = create_canvas(
        cols * tile_w + (cols - 1) * padding,
        rows * tile_h + (rows - 1) * padding,
    )

    placements: list[FrameRect] = []
    for index, item in enumerate(items):
        dest_x = (index % cols) * (tile_w + padding)
        dest_y = (index // cols) * (tile_h + padding)
        frame = item.canvas
        for y in range(frame.height):
            for x in range(frame.width):
                set_pixel(sheet, dest_x + x, dest_y + y, get_pixel(frame, x, y))
        placements.append(
            FrameRect(
                name=item.name if item.name is not None else f"frame_{index}",
                x=dest_x,
                y=dest_y,
                w=frame.width,
                h=frame.height,
            )
        )

    logger.debug(
        "Packed %d frames into %dx%d %s sheet",
        len(items),
        sheet.width,
        sheet.height,
        layout.value,
    )
    return PackedSheet(
        sheet,
        SheetMetadata(frames=placements, tile_width=tile_w, tile_height=tile_h),
    )


def generate_tiled_metadata(
    metadata: SheetMetadata, image_path: str, image_width: int, image_height: int
) -> TiledMetadata:
    """Attach the atlas image to *metadata* for the Tiled map editor."""
    return TiledMetadata(
        image=image_path,
        image_width=image_width,
        image_height=image_height,
        frames=[frame.model_copy() for frame in metadata.frames],
        tile_width=metadata.tile_width,
        tile_height=metadata.tile_height,
    )
