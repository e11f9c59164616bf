"""
Renderable output of a frame for one viewport size.

A Paint picks the prominent color of every cell and encodes the cells as a
run-length string: an escape sequence is only written when the color changes
from one cell to the next, followed by one glyph per cell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from ..color import Color
from ..dimension import Dimension

if TYPE_CHECKING:
    from .frame import Frame

# Code of a cell that only saw transparent pixels
TRANSPARENT_ANSI = -1

# Glyph written for every colored cell
FILL_CHARACTER = "#"

# Glyph written for cells without a resolved color
BLANK_CHARACTER = " "


def prominent_color(
    index: int,
    colors: dict[int, int] | None,
    previous_colors: Sequence[int | None] | None,
) -> int | None:
    """Pick the most visually dominant code of a cell histogram.

    Transparent counts are attributed to the color the previous paint chose
    for the same cell. Grayscale codes count half to favour more distinctive
    colors. Ties go to the lowest code, with unresolved and transparent
    colors losing every tie.

    :param index: Cell index
    :param colors: Histogram of the cell (code -> count), None if empty
    :param previous_colors: Chosen colors of the previous paint, if any
    :return: Chosen code, None if the cell has no color
    """
    if not colors:
        return None

    merged: dict[int | None, int] = {}
    for code, count in colors.items():
        resolved: int | None = code
        if code == TRANSPARENT_ANSI and previous_colors is not None:
            resolved = previous_colors[index] if index < len(previous_colors) else None
        merged[resolved] = merged.get(resolved, 0) + count

    def weight(item: tuple[int | None, int]) -> tuple[float, int, int]:
        code, count = item
        weighted = count / 2 if Color.is_ansi_grayscale(code) else float(count)
        unresolved = code is None or code == TRANSPARENT_ANSI
        return (-weighted, unresolved, code if code is not None else 0)

    return min(merged.items(), key=weight)[0]


class Paint:
    """Immutable ANSI rendering of a :class:`Frame` for a viewport.

    Attributes:
        ascii: The complete colored string
        rows: ``ascii`` split at viewport row boundaries
        colors: Chosen code of every cell, row-major
        frame: The frame this paint was created from
        dimension: Viewport size the paint was created for
    """

    __slots__ = ("_ascii", "_rows", "_colors", "_frame", "_dimension")

    def __init__(
        self,
        frame: "Frame",
        counted_colors: Sequence[dict[int, int] | None],
        dimension: Dimension,
        last_paint: "Paint | None" = None,
        fill_character: str | None = None,
    ):
        """
        Build the paint from per-cell color histograms.

        :param frame: The parent frame
        :param counted_colors: Row-major histograms as returned by ``Frame.count_colors``
        :param dimension: Viewport size in cells
        :param last_paint: Previously painted frame's paint, used for transparent cells
        :param fill_character: Glyph for colored cells (default ``#``)
        """
        glyph = fill_character or FILL_CHARACTER
        previous_colors = last_paint.colors if last_paint is not None else None
        width = dimension.width or 1

        rows: list[str] = []
        row: list[str] = []
        colors: list[int | None] = []
        current: int | None = None
        styled = False

        for i, cell in enumerate(counted_colors):
            if i and i % width == 0:
                rows.append("".join(row))
                row = []

            code = prominent_color(i, cell, previous_colors)
            colors.append(code)

            drawable = code is not None and code != TRANSPARENT_ANSI
            if not drawable:
                if styled:
                    row.append(Color.close_ansi())
                    styled = False
                current = None
                row.append(BLANK_CHARACTER)
                continue

            if code != current:
                row.append(Color.open_ansi(code))
                current = code
                styled = True
            row.append(glyph)

        if styled:
            row.append(Color.close_ansi())
        if row:
            rows.append("".join(row))

        self._frame = frame
        self._dimension = dimension
        self._colors = tuple(colors)
        self._rows = tuple(rows)
        self._ascii = "".join(rows)

    @property
    def ascii(self) -> str:
        return self._ascii

    @property
    def rows(self) -> tuple[str, ...]:
        return self._rows

    @property
    def colors(self) -> tuple[int | None, ...]:
        return self._colors

    @property
    def frame(self) -> "Frame":
        return self._frame

    @property
    def dimension(self) -> Dimension:
        return self._dimension

    def __str__(self) -> str:
        return self._ascii

    def __repr__(self) -> str:
        return f"Paint(frame={self._frame.index}, dimension={self._dimension})"


__all__ = [
    "BLANK_CHARACTER",
    "FILL_CHARACTER",
    "Paint",
    "TRANSPARENT_ANSI",
    "prominent_color",
]
