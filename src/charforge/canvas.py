"""RGBA pixel buffer value type."""

from __future__ import annotations

from dataclasses import dataclass, field

from charforge.errors import BufferSizeMismatchError

BYTES_PER_PIXEL = 4


def expected_buffer_size(width: int, height: int) -> int:
    """Number of bytes an RGBA buffer of ``width × height`` must hold."""
    return width * height * BYTES_PER_PIXEL


def check_buffer_size(width: int, height: int, buffer: bytes | bytearray) -> None:
    """Validate that *buffer* holds exactly ``width × height`` RGBA pixels.

    Raises:
        BufferSizeMismatchError: If the lengths disagree.
    """
    expected = expected_buffer_size(width, height)
    if len(buffer) != expected:
        raise BufferSizeMismatchError(
            f"Buffer of {len(buffer)} bytes does not match "
            f"{width}x{height} RGBA ({expected} bytes)"
        )


@dataclass
class Canvas:
    """A ``width × height`` RGBA8 pixel buffer.

    Pixels are stored row-major, four bytes per pixel (R, G, B, A).
    The buffer is owned by the canvas; use :meth:`clone` to hand out an
    independent copy.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        buffer: Raw RGBA bytes, ``width * height * 4`` long.
    """

    width: int
    height: int
    buffer: bytearray = field(repr=False)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Canvas dimensions must be non-negative, got {self.width}x{self.height}"
            )
        if not isinstance(self.buffer, bytearray):
            self.buffer = bytearray(self.buffer)
        check_buffer_size(self.width, self.height, self.buffer)

    @property
    def size(self) -> tuple[int, int]:
        """Return ``(width, height)``."""
        return (self.width, self.height)

    def in_bounds(self, x: int, y: int) -> bool:
        """Whether ``(x, y)`` addresses a pixel of this canvas."""
        return 0 <= x < self.width and 0 <= y < self.height

    def offset(self, x: int, y: int) -> int:
        """Byte offset of pixel ``(x, y)``; the caller checks bounds."""
        return (y * self.width + x) * BYTES_PER_PIXEL

    def clone(self) -> "Canvas":
        """Return a canvas with an independent copy of the buffer."""
        return Canvas(self.width, self.height, bytearray(self.buffer))


def create_canvas(width: int, height: int) -> Canvas:
    """Create a fully transparent canvas.

    Args:
        width: Canvas width in pixels.
        height: Canvas height in pixels.

    Returns:
        A Canvas whose buffer is all zeros.
    """
    return Canvas(width, height, bytearray(expected_buffer_size(width, height)))
