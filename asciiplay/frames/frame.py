"""
A single decoded image and its quantization onto a terminal cell grid.

Each destination cell of the viewport covers a block of source pixels. For
every cell a histogram of palette codes is collected, from which
:class:`~asciiplay.frames.paint.Paint` picks the prominent color.

Example:
    import numpy as np
    from asciiplay import Dimension, Frame

    pixels = np.zeros((120, 160, 4), dtype=np.uint8)
    pixels[..., 0] = 255  # red
    pixels[..., 3] = 255  # opaque
    frame = Frame(0, pixels, 160, 120)
    paint = frame.get_paint(Dimension(40, 12))
    print(paint.ascii)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence, Union

import numpy as np

from ..color import AnsiColorCache, Color, default_ansi_cache
from ..dimension import Dimension
from .paint import FILL_CHARACTER, TRANSPARENT_ANSI, Paint

logger = logging.getLogger(__name__)

PixelSource = Union[bytes, bytearray, memoryview, Sequence[int], np.ndarray]

# Histogram keys are packed as cell * _CODE_SPAN + (code + 1) so the
# transparency sentinel (-1) maps to 0 and palette codes to 1-256.
_CODE_SPAN = 258


class PixelFormat(Enum):
    """Layout of the raw pixel buffer handed to a :class:`Frame`."""

    RGBA = "rgba"  # 4 bytes per pixel, alpha honoured
    RGB = "rgb"  # 3 bytes per pixel, always opaque

    @property
    def stride(self) -> int:
        """Number of bytes per pixel."""
        return 4 if self is PixelFormat.RGBA else 3

    @property
    def has_alpha(self) -> bool:
        return self is PixelFormat.RGBA

    def decode_color(self, color: Color, cache: AnsiColorCache) -> int:
        """Return the palette code for ``color`` or the transparency sentinel.

        Only alpha-bearing formats ever yield :data:`TRANSPARENT_ANSI`.
        """
        if self.has_alpha and color.has_transparency():
            return TRANSPARENT_ANSI
        return color.to_ansi(cache)


class Frame:
    """One decoded image of a media file.

    The pixel buffer is copied on construction and never exposed directly,
    so frames can be shared freely between the decoder, the frame set and
    the display.

    :param index: Position of the frame within the media
    :param pixels: Raw pixel data, flat or shaped ``(height, width, stride)``
    :param width: Source width in pixels
    :param height: Source height in pixels
    :param pixel_format: Layout of ``pixels`` (RGBA by default)
    :param ansi_cache: Cache used for color conversion (default: process wide)
    """

    def __init__(
        self,
        index: int,
        pixels: PixelSource,
        width: int,
        height: int,
        pixel_format: PixelFormat = PixelFormat.RGBA,
        ansi_cache: AnsiColorCache | None = None,
    ):
        self._index = index
        self._dimension = Dimension(width, height)
        self._pixel_format = pixel_format
        self._ansi_cache = ansi_cache if ansi_cache is not None else default_ansi_cache
        self._pixels = self._to_buffer(pixels)
        self._paint_cache: dict[str, Paint] = {}

        expected = self._dimension.area * pixel_format.stride
        if self._pixels.size != expected:
            raise ValueError(
                f"Expected {expected} bytes for a {self._dimension} {pixel_format.name} frame, "
                f"got {self._pixels.size}"
            )

    @classmethod
    def opaque(
        cls,
        index: int,
        pixels: PixelSource,
        width: int,
        height: int,
        ansi_cache: AnsiColorCache | None = None,
    ) -> "Frame":
        """Create a frame from RGB data without an alpha channel."""
        return cls(index, pixels, width, height, PixelFormat.RGB, ansi_cache)

    @staticmethod
    def _to_buffer(pixels: PixelSource) -> np.ndarray:
        if isinstance(pixels, np.ndarray):
            return np.array(pixels, dtype=np.uint8, copy=True).reshape(-1)
        if isinstance(pixels, (bytes, bytearray, memoryview)):
            return np.frombuffer(bytes(pixels), dtype=np.uint8).copy()
        return np.asarray(list(pixels), dtype=np.uint8)

    # -------------------------------------------------------------------------
    # Painting
    # -------------------------------------------------------------------------

    def get_paint(
        self,
        dimension: Dimension,
        previous_frame: "Frame | None" = None,
        fill_character: str | None = None,
    ) -> Paint:
        """Return the :class:`Paint` of this frame for a viewport size.

        The result is cached per viewport size and glyph, so repeated
        requests return the same instance. Transparent cells borrow their
        color from the previous frame's paint for the same viewport.

        :param dimension: Size of the viewport in cells
        :param previous_frame: Frame painted before this one, if any
        :param fill_character: Glyph used for colored cells (default ``#``)
        :return: The Paint for ``dimension``
        """
        glyph = fill_character or FILL_CHARACTER
        cache_key = f"{dimension}:{glyph}"
        paint = self._paint_cache.get(cache_key)

        if paint is None:
            counted_colors = self.count_colors(dimension)
            last_paint = None
            if previous_frame is not None:
                last_paint = previous_frame.get_paint(dimension, fill_character=glyph)
            paint = Paint(self, counted_colors, dimension, last_paint, fill_character=glyph)
            self._paint_cache[cache_key] = paint

        return paint

    def count_colors(self, dimension: Dimension) -> list[dict[int, int] | None]:
        """Count palette codes within each destination cell.

        A block of ``max(sw / vw, 1)`` by ``max(sh / vh, 1)`` source pixels is
        folded into every cell. Cells no source pixel falls into stay None.

        :param dimension: Size of the viewport in cells
        :return: Row-major list of ``vw * vh`` histograms (code -> count)
        """
        cell_count = dimension.area
        if cell_count == 0:
            return []

        counts: list[dict[int, int] | None] = [None] * cell_count
        pixel_count = self._dimension.area
        if pixel_count == 0:
            return counts

        codes = self._pixel_codes()

        block_width = max(self._dimension.width / dimension.width, 1)
        block_height = max(self._dimension.height / dimension.height, 1)
        pixel_index = np.arange(pixel_count, dtype=np.int64)
        cells = (np.floor(pixel_index / block_width).astype(np.int64) % dimension.width) + (
            np.floor(pixel_index / self._dimension.width / block_height).astype(np.int64)
            * dimension.width
        )

        in_range = cells < cell_count
        if not in_range.all():
            cells = cells[in_range]
            codes = codes[in_range]

        packed = cells * _CODE_SPAN + (codes + 1)
        keys, occurrences = np.unique(packed, return_counts=True)

        for key, occurrence in zip(keys.tolist(), occurrences.tolist()):
            cell, code = divmod(key, _CODE_SPAN)
            histogram = counts[cell]
            if histogram is None:
                histogram = counts[cell] = {}
            histogram[code - 1] = occurrence

        return counts

    def _pixel_codes(self) -> np.ndarray:
        """Palette code (or sentinel) for every pixel, in pixel order."""
        fmt = self._pixel_format
        channels = self._pixels.reshape(-1, fmt.stride).astype(np.uint32)

        packed = (channels[:, 0] << 16) | (channels[:, 1] << 8) | channels[:, 2]
        if fmt.has_alpha:
            packed = (packed << 8) | channels[:, 3]

        unique, inverse = np.unique(packed, return_inverse=True)
        lookup = np.empty(unique.size, dtype=np.int64)
        for i, value in enumerate(unique.tolist()):
            if fmt.has_alpha:
                color = Color(value >> 24, (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)
            else:
                color = Color(value >> 16, (value >> 8) & 0xFF, value & 0xFF)
            lookup[i] = fmt.decode_color(color, self._ansi_cache)

        logger.debug(f"Frame {self._index}: {unique.size} distinct colors")
        return lookup[inverse.reshape(-1)]

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def index(self) -> int:
        return self._index

    @property
    def dimension(self) -> Dimension:
        """Source size in pixels."""
        return self._dimension

    @property
    def pixel_format(self) -> PixelFormat:
        return self._pixel_format

    @property
    def pixels(self) -> np.ndarray:
        """A copy of the flat pixel buffer."""
        return self._pixels.copy()

    def __repr__(self) -> str:
        return f"Frame(index={self._index}, dimension={self._dimension}, format={self._pixel_format.name})"


__all__ = ["Frame", "PixelFormat"]
