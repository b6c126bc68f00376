"""Layered canvas model and layer-stack editing.

A :class:`LayeredCanvas` owns an ordered stack of :class:`Layer` objects,
bottom first.  The stack is never empty: a new canvas starts with a single
transparent ``Layer 0`` and removing the last remaining layer is refused.
Edits mutate the canvas in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from charforge.canvas import check_buffer_size, expected_buffer_size
from charforge.composite import composite_buffer, flatten_layers
from charforge.errors import LayerError
from charforge.logging import get_logger
from charforge.models import BlendMode, LayerMeta, parse_enum

logger = get_logger("layers")

DEFAULT_LAYER_NAME = "Layer 0"
FLATTENED_LAYER_NAME = "Flattened"


@dataclass
class Layer:
    """One named RGBA layer with its compositing settings."""

    name: str
    buffer: bytearray = field(repr=False)
    opacity: int = 255
    visible: bool = True
    blend: BlendMode = BlendMode.NORMAL

    def meta(self) -> LayerMeta:
        """Return the layer's settings without its pixels."""
        return LayerMeta(
            name=self.name,
            opacity=self.opacity,
            visible=self.visible,
            blend=self.blend,
        )


@dataclass
class LayeredCanvas:
    """A stack of same-sized layers, bottom-to-top."""

    width: int
    height: int
    layers: list[Layer]

    def __post_init__(self) -> None:
        if not self.layers:
            raise LayerError("A layered canvas needs at least one layer")
        for layer in self.layers:
            check_buffer_size(self.width, self.height, layer.buffer)

    @property
    def layer_names(self) -> list[str]:
        return [layer.name for layer in self.layers]


def create_layered_canvas(width: int, height: int) -> LayeredCanvas:
    """Create a layered canvas holding one transparent default layer."""
    buffer = bytearray(expected_buffer_size(width, height))
    return LayeredCanvas(width, height, [Layer(DEFAULT_LAYER_NAME, buffer)])


def _validate_opacity(opacity: int) -> int:
    if not 0 <= opacity <= 255:
        raise ValueError(f"Opacity must be between 0 and 255, got {opacity}")
    return opacity


def find_layer(layered: LayeredCanvas, name: str) -> int:
    """Return the index of the first layer called *name*.

    Raises:
        KeyError: If no layer has that name.
    """
    for index, layer in enumerate(layered.layers):
        if layer.name == name:
            return index
    available = ", ".join(layered.layer_names)
    raise KeyError(f"Layer {name!r} not found. Available layers: {available}")


def add_layer(
    layered: LayeredCanvas,
    name: str,
    opacity: int = 255,
    visible: bool = True,
    blend: BlendMode | str = BlendMode.NORMAL,
    buffer: bytes | bytearray | None = None,
) -> Layer:
    """Push a new layer on top of the stack.

    Args:
        layered: Canvas to modify.
        name: Layer name.  Names need not be unique; lookups use the
            first match.
        opacity: Layer opacity (0–255).
        visible: Whether the layer takes part in flattening.
        blend: Blend mode used when compositing the layer.
        buffer: Initial pixels; transparent when omitted.

    Returns:
        The new layer.

    Raises:
        ValueError: If *opacity* is out of range.
        InvalidEnumError: If *blend* is not a known blend mode.
        BufferSizeMismatchError: If *buffer* has the wrong length.
    """
    _validate_opacity(opacity)
    mode = parse_enum(BlendMode, blend, "blend mode")
    if buffer is None:
        pixels = bytearray(expected_buffer_size(layered.width, layered.height))
    else:
        check_buffer_size(layered.width, layered.height, buffer)
        pixels = bytearray(buffer)

    layer = Layer(name, pixels, opacity, visible, mode)
    layered.layers.append(layer)
    logger.debug("Added layer %r (%d layers)", name, len(layered.layers))
    return layer


def remove_layer(layered: LayeredCanvas, name: str) -> Layer:
    """Remove the first layer called *name* and return it.

    Raises:
        KeyError: If no layer has that name.
        LayerError: If it is the only layer left.
    """
    index = find_layer(layered, name)
    if len(layered.layers) == 1:
        raise LayerError(
            "Cannot remove the last layer. A sprite must have at least one layer."
        )
    removed = layered.layers.pop(index)
    logger.debug("Removed layer %r", name)
    return removed


def move_layer(layered: LayeredCanvas, name: str, index: int) -> None:
    """Move the layer called *name* to position *index* (0 = bottom).

    Raises:
        KeyError: If no layer has that name.
        LayerError: If *index* is outside the stack.
    """
    current = find_layer(layered, name)
    if not 0 <= index < len(layered.layers):
        raise LayerError(
            f"Invalid index {index}. Must be between 0 and {len(layered.layers) - 1}"
        )
    if current == index:
        return
    layer = layered.layers.pop(current)
    layered.layers.insert(index, layer)
    logger.debug("Moved layer %r from %d to %d", name, current, index)


def set_layer_opacity(layered: LayeredCanvas, name: str, opacity: int) -> None:
    layered.layers[find_layer(layered, name)].opacity = _validate_opacity(opacity)


def set_layer_visibility(layered: LayeredCanvas, name: str, visible: bool) -> None:
    layered.layers[find_layer(layered, name)].visible = visible


def merge_layers(layered: LayeredCanvas, first: str, second: str) -> Layer:
    """Merge two layers into one.

    The higher layer of the pair is composited over the lower one using
    the higher layer's opacity and blend mode.  The result replaces
    *first* in its original position and is named ``"first + second"``;
    *second* is removed.  The merged layer keeps the lower of the two
    opacities and is visible only if both inputs were.

    Returns:
        The merged layer.

    Raises:
        KeyError: If either layer is missing.
        LayerError: If both names refer to the same layer.
    """
    if first == second:
        raise LayerError("Cannot merge a layer with itself")
    first_index = find_layer(layered, first)
    second_index = find_layer(layered, second)
    first_layer = layered.layers[first_index]
    second_layer = layered.layers[second_index]

    if first_index < second_index:
        bottom, top = first_layer, second_layer
    else:
        bottom, top = second_layer, first_layer

    merged = bytearray(bottom.buffer)
    composite_buffer(merged, top.buffer, top.opacity, top.blend)

    first_layer.buffer = merged
    first_layer.name = f"{first} + {second}"
    first_layer.opacity = min(first_layer.opacity, second_layer.opacity)
    first_layer.visible = first_layer.visible and second_layer.visible
    del layered.layers[second_index]

    logger.debug("Merged layers into %r", first_layer.name)
    return first_layer


def flatten_to_single_layer(layered: LayeredCanvas) -> Layer:
    """Replace the whole stack with one opaque-settings ``Flattened`` layer."""
    flattened = flatten_layers(layered)
    layer = Layer(FLATTENED_LAYER_NAME, flattened.buffer)
    layered.layers = [layer]
    return layer
