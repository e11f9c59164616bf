"""Tests for Frame color counting and paint caching."""

import numpy as np
import pytest

from asciiplay.color import Color
from asciiplay.dimension import Dimension
from asciiplay.frames import TRANSPARENT_ANSI, Frame, PixelFormat

from conftest import BLUE, CLEAR, GRAY, RED, solid_frame

OPEN_RED = "\033[38;5;196m"
OPEN_BLUE = "\033[38;5;21m"
CLOSE = "\033[39m"


class TestFrameConstruction:
    """Tests for Frame construction."""

    def test_properties(self, ansi_cache):
        """Test properties."""
        frame = solid_frame(7, RED, 4, 3, ansi_cache)
        assert frame.index == 7
        assert frame.dimension == Dimension(4, 3)
        assert frame.pixel_format is PixelFormat.RGBA
        assert frame.pixels.size == 4 * 3 * 4

    def test_buffer_size_mismatch(self):
        """Test buffer size mismatch."""
        with pytest.raises(ValueError):
            Frame(0, bytes(10), 2, 2)

    def test_accepts_shaped_arrays(self, ansi_cache):
        """Test accepts shaped arrays."""
        arr = np.zeros((2, 3, 4), dtype=np.uint8)
        arr[:, :, 0] = 255
        arr[:, :, 3] = 255
        frame = Frame(0, arr, 3, 2, ansi_cache=ansi_cache)
        assert frame.count_colors(Dimension(1, 1)) == [{196: 6}]

    def test_pixels_are_copied(self, ansi_cache):
        """Test pixels are copied."""
        buffer = bytearray(bytes(RED) * 4)
        frame = Frame(0, buffer, 2, 2, ansi_cache=ansi_cache)
        buffer[0] = 0
        assert frame.pixels[0] == 255

    def test_opaque_frame(self, ansi_cache):
        """Test opaque frame."""
        frame = Frame.opaque(0, bytes([0, 0, 255]) * 4, 2, 2, ansi_cache)
        assert frame.pixel_format is PixelFormat.RGB
        assert frame.count_colors(Dimension(1, 1)) == [{21: 4}]


class TestPixelFormat:
    """Tests for PixelFormat."""

    def test_strides(self):
        """Test strides."""
        assert PixelFormat.RGBA.stride == 4
        assert PixelFormat.RGB.stride == 3

    def test_rgba_yields_sentinel_for_transparent_pixels(self, ansi_cache):
        """Test RGBA yields sentinel for transparent pixels."""
        assert PixelFormat.RGBA.decode_color(Color(255, 0, 0, 10), ansi_cache) == TRANSPARENT_ANSI
        assert PixelFormat.RGBA.decode_color(Color(255, 0, 0), ansi_cache) == 196

    def test_rgb_never_yields_sentinel(self, ansi_cache):
        """Test RGB never yields sentinel."""
        assert PixelFormat.RGB.decode_color(Color(255, 0, 0, 0), ansi_cache) == 196


class TestCountColors:
    """Tests for Frame.count_colors."""

    def test_block_folds_into_one_cell(self, ansi_cache):
        """Test block folds into one cell."""
        frame = solid_frame(0, RED, 2, 2, ansi_cache)
        assert frame.count_colors(Dimension(1, 1)) == [{196: 4}]

    def test_halves_map_to_cells(self, ansi_cache):
        """Test halves map to cells."""
        # 4x2 source: left half red, right half blue
        row = bytes(RED) * 2 + bytes(BLUE) * 2
        frame = Frame(0, row * 2, 4, 2, ansi_cache=ansi_cache)
        assert frame.count_colors(Dimension(2, 1)) == [{196: 4}, {21: 4}]

    def test_mixed_histogram(self, ansi_cache):
        """Test mixed histogram."""
        pixels = bytes(RED) * 2 + bytes(GRAY) + bytes(CLEAR)
        frame = Frame(0, pixels, 2, 2, ansi_cache=ansi_cache)
        assert frame.count_colors(Dimension(1, 1)) == [{196: 2, 244: 1, TRANSPARENT_ANSI: 1}]

    def test_cells_without_pixels_are_none(self, ansi_cache):
        """Test cells without pixels are None."""
        frame = solid_frame(0, RED, 1, 1, ansi_cache)
        assert frame.count_colors(Dimension(2, 2)) == [{196: 1}, None, None, None]

    def test_zero_area_viewport(self, ansi_cache):
        """Test zero area viewport."""
        frame = solid_frame(0, RED, 2, 2, ansi_cache)
        assert frame.count_colors(Dimension(0, 5)) == []

    def test_one_cache_lookup_per_distinct_color(self, ansi_cache):
        """Test one cache lookup per distinct color."""
        frame = solid_frame(0, RED, 8, 8, ansi_cache)
        frame.count_colors(Dimension(2, 2))
        assert ansi_cache.misses == 1
        assert ansi_cache.hits == 0


class TestGetPaint:
    """Tests for Frame.get_paint."""

    def test_single_color_into_single_cell(self, ansi_cache):
        """Test single color into single cell."""
        frame = solid_frame(0, RED, 2, 2, ansi_cache)
        assert frame.get_paint(Dimension(1, 1)).ascii == f"{OPEN_RED}#{CLOSE}"

    def test_paint_is_cached_per_dimension(self, ansi_cache):
        """Test paint is cached per dimension."""
        frame = solid_frame(0, RED, 2, 2, ansi_cache)
        paint = frame.get_paint(Dimension(1, 1))

        assert frame.get_paint(Dimension(1, 1)) is paint
        assert frame.get_paint(Dimension(2, 2)) is not paint

    def test_identical_frames_paint_identically(self, ansi_cache):
        """Test identical frames paint identically."""
        first = solid_frame(0, BLUE, 4, 4, ansi_cache)
        second = solid_frame(1, BLUE, 4, 4, ansi_cache)
        assert first.get_paint(Dimension(2, 2)).ascii == second.get_paint(Dimension(2, 2)).ascii

    def test_transparent_frame_reuses_previous_colors(self, ansi_cache):
        """Test transparent frame reuses previous colors."""
        row = bytes(RED) * 2 + bytes(BLUE) * 2
        previous = Frame(0, row * 2, 4, 2, ansi_cache=ansi_cache)
        transparent = solid_frame(1, CLEAR, 4, 2, ansi_cache)
        dimension = Dimension(2, 1)

        paint = transparent.get_paint(dimension, previous)
        previous_paint = previous.get_paint(dimension)

        assert paint.colors == previous_paint.colors == (196, 21)
        assert paint.ascii == f"{OPEN_RED}#{OPEN_BLUE}#{CLOSE}"

    def test_transparent_frame_without_previous_is_blank(self, ansi_cache):
        """Test transparent frame without previous is blank."""
        frame = solid_frame(0, CLEAR, 2, 2, ansi_cache)
        assert frame.get_paint(Dimension(1, 1)).ascii == " "

    def test_fill_character(self, ansi_cache):
        """Test fill character."""
        frame = solid_frame(0, RED, 2, 2, ansi_cache)
        assert frame.get_paint(Dimension(1, 1), fill_character="@").ascii == f"{OPEN_RED}@{CLOSE}"

    def test_paints_are_cached_per_glyph(self, ansi_cache):
        """Test a different fill glyph is not served from the cache."""
        frame = solid_frame(0, RED, 2, 2, ansi_cache)
        dimension = Dimension(1, 1)

        hashes = frame.get_paint(dimension)
        ats = frame.get_paint(dimension, fill_character="@")

        assert hashes.ascii == f"{OPEN_RED}#{CLOSE}"
        assert ats.ascii == f"{OPEN_RED}"
        assert frame.get_paint(dimension, fill_character="#") is hashes
        assert frame.get_paint(dimension, fill_character="@") is ats
