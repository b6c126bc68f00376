"""Tests for charforge.canvas — the RGBA buffer value type."""

from __future__ import annotations

import pytest

from charforge.canvas import (
    BYTES_PER_PIXEL,
    Canvas,
    check_buffer_size,
    create_canvas,
    expected_buffer_size,
)
from charforge.errors import BufferSizeMismatchError


class TestCreateCanvas:
    """Tests for create_canvas."""

    def test_buffer_is_transparent(self) -> None:
        canvas = create_canvas(3, 2)
        assert canvas.size == (3, 2)
        assert len(canvas.buffer) == 3 * 2 * BYTES_PER_PIXEL
        assert set(canvas.buffer) == {0}

    def test_zero_size_canvas(self) -> None:
        canvas = create_canvas(0, 0)
        assert canvas.buffer == bytearray()


class TestCanvasInvariants:
    """Tests for buffer length checks and copies."""

    def test_mismatched_buffer_rejected(self) -> None:
        """A buffer shorter than width*height*4 raises."""
        with pytest.raises(BufferSizeMismatchError):
            Canvas(2, 2, bytearray(15))

    def test_negative_dimensions_rejected(self) -> None:
        with pytest.raises(ValueError):
            Canvas(-1, 1, bytearray())

    def test_bytes_buffer_is_copied_into_bytearray(self) -> None:
        canvas = Canvas(1, 1, b"\x01\x02\x03\x04")
        assert isinstance(canvas.buffer, bytearray)

    def test_clone_is_independent(self) -> None:
        """Mutating a clone never affects the original."""
        canvas = create_canvas(2, 2)
        copy = canvas.clone()
        copy.buffer[0] = 200
        assert canvas.buffer[0] == 0
        assert copy.size == canvas.size

    def test_in_bounds(self) -> None:
        canvas = create_canvas(2, 3)
        assert canvas.in_bounds(0, 0)
        assert canvas.in_bounds(1, 2)
        assert not canvas.in_bounds(2, 0)
        assert not canvas.in_bounds(0, -1)

    def test_offset_is_row_major(self) -> None:
        canvas = create_canvas(5, 5)
        assert canvas.offset(0, 0) == 0
        assert canvas.offset(1, 0) == 4
        assert canvas.offset(0, 1) == 20


class TestBufferSize:
    """Tests for the buffer size helpers."""

    def test_expected_buffer_size(self) -> None:
        assert expected_buffer_size(4, 3) == 48

    def test_check_buffer_size_accepts_exact(self) -> None:
        check_buffer_size(2, 2, bytes(16))

    def test_check_buffer_size_message(self) -> None:
        with pytest.raises(BufferSizeMismatchError, match="2x2"):
            check_buffer_size(2, 2, bytes(12))
