"""Tests for charforge.layers — the layer stack and its edits."""

from __future__ import annotations

import pytest

from charforge.errors import BufferSizeMismatchError, InvalidEnumError, LayerError
from charforge.layers import (
    DEFAULT_LAYER_NAME,
    FLATTENED_LAYER_NAME,
    Layer,
    LayeredCanvas,
    add_layer,
    create_layered_canvas,
    find_layer,
    flatten_to_single_layer,
    merge_layers,
    move_layer,
    remove_layer,
    set_layer_opacity,
    set_layer_visibility,
)
from charforge.models import BlendMode


@pytest.fixture()
def layered() -> LayeredCanvas:
    """A 1x1 canvas with layers 'Layer 0', 'a', 'b' bottom to top."""
    canvas = create_layered_canvas(1, 1)
    add_layer(canvas, "a")
    add_layer(canvas, "b")
    return canvas


class TestCreateLayeredCanvas:
    """Tests for construction and invariants."""

    def test_starts_with_default_layer(self) -> None:
        canvas = create_layered_canvas(3, 2)
        assert canvas.layer_names == [DEFAULT_LAYER_NAME]
        layer = canvas.layers[0]
        assert len(layer.buffer) == 3 * 2 * 4
        assert layer.opacity == 255
        assert layer.visible
        assert layer.blend is BlendMode.NORMAL

    def test_mismatched_layer_buffer_rejected(self) -> None:
        with pytest.raises(BufferSizeMismatchError):
            LayeredCanvas(2, 2, [Layer("bad", bytearray(4))])

    def test_empty_stack_rejected(self) -> None:
        """A layered canvas cannot be built without layers."""
        with pytest.raises(LayerError, match="at least one layer"):
            LayeredCanvas(2, 2, [])

    def test_layer_meta(self) -> None:
        meta = Layer("x", bytearray(4), opacity=10, visible=False).meta()
        assert meta.name == "x"
        assert meta.opacity == 10
        assert not meta.visible


class TestAddRemove:
    """Tests for add_layer / remove_layer / find_layer."""

    def test_add_goes_on_top(self, layered: LayeredCanvas) -> None:
        add_layer(layered, "c", opacity=100, blend="screen")
        assert layered.layer_names[-1] == "c"
        assert layered.layers[-1].blend is BlendMode.SCREEN

    def test_add_copies_buffer(self) -> None:
        canvas = create_layered_canvas(1, 1)
        pixels = bytearray([1, 2, 3, 4])
        add_layer(canvas, "p", buffer=pixels)
        pixels[0] = 99
        assert canvas.layers[1].buffer[0] == 1

    def test_add_bad_opacity(self, layered: LayeredCanvas) -> None:
        with pytest.raises(ValueError):
            add_layer(layered, "c", opacity=256)

    def test_add_bad_blend(self, layered: LayeredCanvas) -> None:
        with pytest.raises(InvalidEnumError):
            add_layer(layered, "c", blend="dodge")

    def test_add_bad_buffer(self, layered: LayeredCanvas) -> None:
        with pytest.raises(BufferSizeMismatchError):
            add_layer(layered, "c", buffer=bytearray(8))

    def test_remove(self, layered: LayeredCanvas) -> None:
        removed = remove_layer(layered, "a")
        assert removed.name == "a"
        assert layered.layer_names == [DEFAULT_LAYER_NAME, "b"]

    def test_remove_last_layer_rejected(self) -> None:
        canvas = create_layered_canvas(1, 1)
        with pytest.raises(LayerError):
            remove_layer(canvas, DEFAULT_LAYER_NAME)
        assert len(canvas.layers) == 1

    def test_find_missing_layer(self, layered: LayeredCanvas) -> None:
        with pytest.raises(KeyError):
            find_layer(layered, "nope")


class TestReorderAndSettings:
    """Tests for move_layer and per-layer settings."""

    def test_move_to_bottom(self, layered: LayeredCanvas) -> None:
        move_layer(layered, "b", 0)
        assert layered.layer_names == ["b", DEFAULT_LAYER_NAME, "a"]

    def test_move_bad_index(self, layered: LayeredCanvas) -> None:
        with pytest.raises(LayerError):
            move_layer(layered, "a", 3)

    def test_set_opacity(self, layered: LayeredCanvas) -> None:
        set_layer_opacity(layered, "a", 10)
        assert layered.layers[1].opacity == 10

    def test_set_opacity_out_of_range(self, layered: LayeredCanvas) -> None:
        with pytest.raises(ValueError):
            set_layer_opacity(layered, "a", -1)

    def test_set_visibility(self, layered: LayeredCanvas) -> None:
        set_layer_visibility(layered, "b", False)
        assert not layered.layers[2].visible


class TestMergeAndFlatten:
    """Tests for merge_layers and flatten_to_single_layer."""

    def test_merge_composites_upper_over_lower(self) -> None:
        canvas = create_layered_canvas(1, 1)
        canvas.layers[0].buffer[:] = bytearray([255, 0, 0, 255])
        add_layer(canvas, "top", opacity=200, buffer=bytearray([0, 0, 255, 255]))

        merged = merge_layers(canvas, DEFAULT_LAYER_NAME, "top")

        assert canvas.layer_names == [f"{DEFAULT_LAYER_NAME} + top"]
        assert merged.opacity == 200
        assert merged.buffer[2] > merged.buffer[0]

    def test_merge_keeps_first_position(self, layered: LayeredCanvas) -> None:
        merge_layers(layered, "b", "a")
        assert layered.layer_names == [DEFAULT_LAYER_NAME, "b + a"]

    def test_merge_visibility_requires_both(self, layered: LayeredCanvas) -> None:
        set_layer_visibility(layered, "a", False)
        merged = merge_layers(layered, "a", "b")
        assert not merged.visible

    def test_merge_with_itself_rejected(self, layered: LayeredCanvas) -> None:
        with pytest.raises(LayerError):
            merge_layers(layered, "a", "a")

    def test_flatten_to_single_layer(self) -> None:
        canvas = create_layered_canvas(1, 1)
        add_layer(canvas, "top", buffer=bytearray([0, 0, 255, 255]))
        layer = flatten_to_single_layer(canvas)
        assert canvas.layer_names == [FLATTENED_LAYER_NAME]
        assert layer.buffer == bytearray([0, 0, 255, 255])
