"""Porter-Duff source-over compositing and layer flattening."""

from __future__ import annotations

from typing import TYPE_CHECKING

from charforge.blend import apply_blend_mode, round_half_up
from charforge.canvas import BYTES_PER_PIXEL, Canvas, create_canvas
from charforge.models import BlendMode, parse_enum

if TYPE_CHECKING:
    from charforge.layers import LayeredCanvas


def alpha_blend(
    dst: bytearray,
    src: bytes | bytearray,
    opacity: int,
    mode: BlendMode | str = BlendMode.NORMAL,
    dst_offset: int = 0,
    src_offset: int = 0,
) -> None:
    """Composite one RGBA pixel of *src* onto *dst* in place.

    The source's effective alpha is its own alpha scaled by *opacity*.
    Color channels are first passed through the blend mode and then
    mixed with standard source-over weighting.  A fully transparent
    effective source leaves the destination untouched.

    Args:
        dst: Destination buffer, modified in place.
        src: Source buffer.
        opacity: Layer opacity (0–255).
        mode: Blend mode for the color channels.
        dst_offset: Byte offset of the destination pixel.
        src_offset: Byte offset of the source pixel.
    """
    src_alpha = (src[src_offset + 3] * (opacity / 255)) / 255
    if src_alpha == 0:
        return

    mode = parse_enum(BlendMode, mode, "blend mode")
    dst_alpha = dst[dst_offset + 3] / 255
    out_alpha = src_alpha + dst_alpha * (1 - src_alpha)

    if out_alpha == 0:
        dst[dst_offset : dst_offset + BYTES_PER_PIXEL] = b"\x00\x00\x00\x00"
        return

    dst_weight = dst_alpha * (1 - src_alpha)
    for i in range(3):
        base = dst[dst_offset + i]
        blended = apply_blend_mode(base, src[src_offset + i], mode)
        value = (blended * src_alpha + base * dst_weight) / out_alpha
        dst[dst_offset + i] = min(255, max(0, round_half_up(value)))
    dst[dst_offset + 3] = min(255, round_half_up(out_alpha * 255))


def composite_buffer(
    dst: bytearray,
    src: bytes | bytearray,
    opacity: int,
    mode: BlendMode | str = BlendMode.NORMAL,
) -> None:
    """Alpha-blend every pixel of *src* onto the same-sized *dst*."""
    mode = parse_enum(BlendMode, mode, "blend mode")
    for o in range(0, len(dst), BYTES_PER_PIXEL):
        if src[o + 3]:
            alpha_blend(dst, src, opacity, mode, o, o)


def flatten_layers(layered: "LayeredCanvas") -> Canvas:
    """Composite every visible layer bottom-to-top into a new canvas.

    Invisible layers are skipped entirely; each visible layer is blended
    with its own opacity and blend mode.
    """
    result = create_canvas(layered.width, layered.height)
    for layer in layered.layers:
        if not layer.visible:
            continue
        composite_buffer(result.buffer, layer.buffer, layer.opacity, layer.blend)
    return result
