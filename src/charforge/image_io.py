"""PNG encoding and decoding for canvases via Pillow."""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from charforge.canvas import Canvas, check_buffer_size
from charforge.logging import get_logger

logger = get_logger("image_io")


def canvas_to_image(canvas: Canvas) -> Image.Image:
    """Wrap a canvas's pixels in a new RGBA Pillow image.

    Raises:
        BufferSizeMismatchError: If the buffer does not match the size.
    """
    check_buffer_size(canvas.width, canvas.height, canvas.buffer)
    if canvas.width == 0 or canvas.height == 0:
        return Image.new("RGBA", (canvas.width, canvas.height))
    return Image.frombytes("RGBA", (canvas.width, canvas.height), bytes(canvas.buffer))


def image_to_canvas(image: Image.Image) -> Canvas:
    """Copy a Pillow image into a canvas, converting to RGBA first."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    width, height = image.size
    return Canvas(width, height, bytearray(image.tobytes()))


def canvas_to_png_bytes(canvas: Canvas) -> bytes:
    """Encode *canvas* as PNG.

    Raises:
        ValueError: If the canvas has no pixels; PNG cannot hold an empty image.
    """
    if canvas.width == 0 or canvas.height == 0:
        raise ValueError("Cannot encode an empty canvas as PNG")
    buf = io.BytesIO()
    canvas_to_image(canvas).save(buf, format="PNG")
    return buf.getvalue()


def canvas_from_png_bytes(data: bytes) -> Canvas:
    """Decode PNG bytes into a canvas.

    Raises:
        ValueError: If the bytes are not a readable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return image_to_canvas(img)
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError("Cannot decode PNG data") from exc


def read_png(path: str | Path) -> Canvas:
    """Load an image file into a canvas.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file cannot be decoded.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Image not found: {p}")
    try:
        with Image.open(p) as img:
            img.load()
            return image_to_canvas(img)
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError(f"Cannot open image: {p}") from exc


def write_png(path: str | Path, canvas: Canvas) -> Path:
    """Save *canvas* as PNG, creating parent directories as needed."""
    data = canvas_to_png_bytes(canvas)
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(data)
    logger.debug("Wrote %dx%d PNG to %s", canvas.width, canvas.height, dest)
    return dest
