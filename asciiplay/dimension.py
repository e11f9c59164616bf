"""Width/height pairs for source pixel grids and terminal viewports."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, init=False)
class Dimension:
    """Non-negative width and height.

    Negative inputs are stored as their absolute value and ``None`` as 0, so
    a Dimension is always safe to use for area and index calculations.

    Example:
        >>> Dimension(-80, 24)
        Dimension(width=80, height=24)
        >>> str(Dimension(80, 24))
        '80x24'
    """

    width: int
    height: int

    def __init__(self, width: int | None = 0, height: int | None = 0):
        object.__setattr__(self, "width", abs(width) if width else 0)
        object.__setattr__(self, "height", abs(height) if height else 0)

    @property
    def area(self) -> int:
        """Number of cells (or pixels) covered."""
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


__all__ = ["Dimension"]
