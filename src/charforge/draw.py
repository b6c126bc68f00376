"""Pixel access and rasterization primitives.

All functions operate in place on a :class:`~charforge.canvas.Canvas`
unless documented otherwise.  Colors may be passed as
:class:`~charforge.models.Color` instances or ``(R, G, B, A)`` tuples.
"""

from __future__ import annotations

from typing import Union

from charforge.canvas import BYTES_PER_PIXEL, Canvas
from charforge.errors import OutOfBoundsError
from charforge.models import Color

ColorLike = Union[Color, tuple[int, int, int, int]]


def as_rgba(color: ColorLike) -> tuple[int, int, int, int]:
    """Normalize a color argument to an ``(R, G, B, A)`` tuple."""
    if isinstance(color, Color):
        return color.rgba
    r, g, b, a = color
    return (r, g, b, a)


def _check_bounds(canvas: Canvas, x: int, y: int) -> None:
    if not canvas.in_bounds(x, y):
        raise OutOfBoundsError(
            f"Pixel coordinates out of bounds: ({x}, {y}) "
            f"for {canvas.width}x{canvas.height} canvas"
        )


def get_pixel(canvas: Canvas, x: int, y: int) -> Color:
    """Return the color at ``(x, y)``.

    Raises:
        OutOfBoundsError: If ``(x, y)`` lies outside the canvas.
    """
    _check_bounds(canvas, x, y)
    o = canvas.offset(x, y)
    buf = canvas.buffer
    return Color(r=buf[o], g=buf[o + 1], b=buf[o + 2], a=buf[o + 3])


def set_pixel(canvas: Canvas, x: int, y: int, color: ColorLike) -> None:
    """Overwrite the pixel at ``(x, y)`` with *color* (no blending).

    Raises:
        OutOfBoundsError: If ``(x, y)`` lies outside the canvas.
    """
    _check_bounds(canvas, x, y)
    o = canvas.offset(x, y)
    canvas.buffer[o : o + BYTES_PER_PIXEL] = bytes(as_rgba(color))


def draw_line(
    canvas: Canvas, x0: int, y0: int, x1: int, y1: int, color: ColorLike
) -> None:
    """Draw a 1px line with integer Bresenham stepping.

    Endpoints are put in a canonical order first, so ``draw_line(a, b)``
    and ``draw_line(b, a)`` paint the same pixels.

    Raises:
        OutOfBoundsError: If any pixel of the line lies outside the canvas.
    """
    if (x1, y1) < (x0, y0):
        x0, y0, x1, y1 = x1, y1, x0, y0

    rgba = as_rgba(color)
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    x, y = x0, y0

    while True:
        set_pixel(canvas, x, y, rgba)
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


def draw_rect(
    canvas: Canvas,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    color: ColorLike,
    filled: bool = False,
) -> None:
    """Draw a rectangle with inclusive corners ``(x0, y0)`` and ``(x1, y1)``.

    Corner order does not matter.  A filled rectangle is painted one
    scanline at a time; an outlined one is four independent lines,
    collapsing to a single line when the rectangle is 1px wide or tall.

    Raises:
        OutOfBoundsError: If the rectangle extends past the canvas.
    """
    left, right = min(x0, x1), max(x0, x1)
    top, bottom = min(y0, y1), max(y0, y1)
    rgba = as_rgba(color)

    if filled:
        _check_bounds(canvas, left, top)
        _check_bounds(canvas, right, bottom)
        span = bytes(rgba) * (right - left + 1)
        for y in range(top, bottom + 1):
            start = canvas.offset(left, y)
            canvas.buffer[start : start + len(span)] = span
    elif left == right or top == bottom:
        draw_line(canvas, left, top, right, bottom, rgba)
    else:
        draw_line(canvas, left, top, right, top, rgba)
        draw_line(canvas, left, bottom, right, bottom, rgba)
        draw_line(canvas, left, top, left, bottom, rgba)
        draw_line(canvas, right, top, right, bottom, rgba)


def flood_fill(canvas: Canvas, x: int, y: int, color: ColorLike) -> None:
    """Fill the 4-connected region containing ``(x, y)`` with *color*.

    Uses an explicit work stack, so region size is bounded only by the
    canvas.  Starting outside the canvas, or on a pixel that already has
    the fill color, is a no-op.
    """
    if not canvas.in_bounds(x, y):
        return

    buf = canvas.buffer
    start = canvas.offset(x, y)
    target = bytes(buf[start : start + BYTES_PER_PIXEL])
    fill = bytes(as_rgba(color))
    if target == fill:
        return

    stack = [(x, y)]
    while stack:
        px, py = stack.pop()
        if not canvas.in_bounds(px, py):
            continue
        o = canvas.offset(px, py)
        if buf[o : o + BYTES_PER_PIXEL] != target:
            continue
        buf[o : o + BYTES_PER_PIXEL] = fill
        stack.append((px + 1, py))
        stack.append((px - 1, py))
        stack.append((px, py + 1))
        stack.append((px, py - 1))


def _circle_points(cx: int, cy: int, radius: int) -> list[tuple[int, int]]:
    """Midpoint-circle outline points, all eight octants."""
    points: list[tuple[int, int]] = []
    x, y = 0, radius
    d = 1 - radius
    while x <= y:
        points.extend(
            (
                (cx + x, cy + y),
                (cx - x, cy + y),
                (cx + x, cy - y),
                (cx - x, cy - y),
                (cx + y, cy + x),
                (cx - y, cy + x),
                (cx + y, cy - x),
                (cx - y, cy - x),
            )
        )
        if d < 0:
            d += 2 * x + 3
        else:
            d += 2 * (x - y) + 5
            y -= 1
        x += 1
    return points


def draw_circle(
    canvas: Canvas,
    cx: int,
    cy: int,
    radius: int,
    color: ColorLike,
    filled: bool = False,
) -> None:
    """Draw a midpoint circle centered on ``(cx, cy)``, clipped to the canvas.

    The filled variant collapses the symmetric outline points into one
    ``[x_min, x_max]`` span per scanline and fills each span, which
    leaves no gaps at the octant seams.

    Raises:
        ValueError: If *radius* is negative.
    """
    if radius < 0:
        raise ValueError(f"Circle radius must be non-negative, got {radius}")

    rgba = as_rgba(color)
    if radius == 0:
        if canvas.in_bounds(cx, cy):
            set_pixel(canvas, cx, cy, rgba)
        return

    points = _circle_points(cx, cy, radius)

    if not filled:
        for px, py in points:
            if canvas.in_bounds(px, py):
                set_pixel(canvas, px, py, rgba)
        return

    spans: dict[int, tuple[int, int]] = {}
    for px, py in points:
        lo, hi = spans.get(py, (px, px))
        spans[py] = (min(lo, px), max(hi, px))

    for py, (lo, hi) in spans.items():
        if not 0 <= py < canvas.height:
            continue
        for px in range(max(lo, 0), min(hi, canvas.width - 1) + 1):
            set_pixel(canvas, px, py, rgba)


def replace_color(canvas: Canvas, old: ColorLike, new: ColorLike) -> int:
    """Replace every pixel exactly equal to *old* (all four channels).

    Returns:
        The number of pixels replaced.
    """
    old_bytes = bytes(as_rgba(old))
    new_bytes = bytes(as_rgba(new))
    buf = canvas.buffer
    replaced = 0
    for o in range(0, len(buf), BYTES_PER_PIXEL):
        if buf[o : o + BYTES_PER_PIXEL] == old_bytes:
            buf[o : o + BYTES_PER_PIXEL] = new_bytes
            replaced += 1
    return replaced


def add_outline(canvas: Canvas, color: ColorLike) -> Canvas:
    """Return a copy with a 1px outline around every opaque shape.

    A pixel is outlined when it is fully transparent and at least one of
    its 4-connected neighbours is not.  The input canvas is unchanged.
    """
    rgba = as_rgba(color)
    src = canvas.buffer
    result = canvas.clone()

    def transparent(px: int, py: int) -> bool:
        return src[canvas.offset(px, py) + 3] == 0

    for y in range(canvas.height):
        for x in range(canvas.width):
            if not transparent(x, y):
                continue
            for nx, ny in ((x, y - 1), (x, y + 1), (x - 1, y), (x + 1, y)):
                if canvas.in_bounds(nx, ny) and not transparent(nx, ny):
                    set_pixel(result, x, y, rgba)
                    break
    return result
