"""
RGBA colors and their conversion to the terminal's 256 color palette.

Conversions are memoized by an :class:`AnsiColorCache`. A process wide
default cache is used unless a cache is passed explicitly, which allows tests
(and multiple players) to work with isolated caches.

Example:
    from asciiplay.color import AnsiColorCache, Color

    cache = AnsiColorCache()
    code = Color(255, 0, 0).to_ansi(cache)  # 196
    print(f"{Color.open_ansi(code)}#{Color.close_ansi()}")
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass

# ANSI escape codes
ESC = "\033"
CLOSE_FOREGROUND = f"{ESC}[39m"


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def rgb_to_ansi256(red: int, green: int, blue: int) -> int:
    """Quantize an RGB triple to an index of the xterm 256 color palette.

    Pure grays map onto the 24 step grayscale ramp (232-255) or the black and
    white corners of the color cube. All other colors map onto the 6x6x6
    color cube starting at index 16.

    :param red: Red component (0-255)
    :param green: Green component (0-255)
    :param blue: Blue component (0-255)
    :return: Palette index (16-255)
    """
    if red == green == blue:
        if red < 8:
            return 16
        if red > 248:
            return 231
        return _round_half_up((red - 8) / 247 * 24) + 232

    return (
        16
        + 36 * _round_half_up(red / 255 * 5)
        + 6 * _round_half_up(green / 255 * 5)
        + _round_half_up(blue / 255 * 5)
    )


class AnsiColorCache:
    """Memoizes color to ANSI code conversions keyed by serialized RGBA.

    :param max_size: Maximum number of entries (None = unbounded). When
        bounded, the oldest entries are evicted first.
    """

    def __init__(self, max_size: int | None = None):
        if max_size is not None and max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._entries: OrderedDict[str, int] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def lookup(self, color: "Color") -> int:
        """Return the ANSI code for ``color``, converting it on first use."""
        key = Color.serialize(color)
        code = self._entries.get(key)
        if code is not None:
            self.hits += 1
            return code

        self.misses += 1
        code = rgb_to_ansi256(color.red, color.green, color.blue)
        self._entries[key] = code
        if self.max_size is not None and len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
        return code

    def clear(self) -> None:
        """Drop all memoized conversions."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __contains__(self, color: object) -> bool:
        if isinstance(color, Color):
            return Color.serialize(color) in self._entries
        return color in self._entries

    def __len__(self) -> int:
        return len(self._entries)


default_ansi_cache = AnsiColorCache()


@dataclass(frozen=True)
class Color:
    """An 8 bit per channel RGBA color.

    Attributes:
        red: Red component (0-255)
        green: Green component (0-255)
        blue: Blue component (0-255)
        alpha: Alpha component (0-255), 255 meaning fully opaque
    """

    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "alpha"):
            value = int(getattr(self, name))
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be between 0 and 255, got {value}")
            object.__setattr__(self, name, value)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    @staticmethod
    def serialize(color: "Color | None") -> str | None:
        """Serialize to ``"r,g,b,a"`` (None stays None)."""
        if color is None:
            return None
        return f"{color.red},{color.green},{color.blue},{color.alpha}"

    @classmethod
    def deserialize(cls, color: str | None) -> "Color | None":
        """Create a Color from the output of :meth:`serialize`."""
        if color is None:
            return None
        parts = color.split(",")
        if len(parts) not in (3, 4):
            raise ValueError(f"Invalid serialized color: {color!r}")
        return cls(*(int(part) for part in parts))

    # -------------------------------------------------------------------------
    # ANSI helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def is_ansi_grayscale(code: int | None) -> bool:
        """Whether the palette index lies on the grayscale ramp or its edges."""
        if code is None:
            return False
        return code >= 232 or code == 59 or code == 16

    @staticmethod
    def open_ansi(code: int) -> str:
        """Escape sequence switching the foreground to palette index ``code``."""
        return f"{ESC}[38;5;{code}m"

    @staticmethod
    def close_ansi() -> str:
        """Escape sequence restoring the default foreground."""
        return CLOSE_FOREGROUND

    def has_transparency(self) -> bool:
        return self.alpha < 255

    def to_ansi(self, cache: AnsiColorCache | None = None) -> int:
        """Convert to a 256 color palette index.

        :param cache: Cache to memoize the conversion in (default: process wide cache)
        :return: Palette index
        """
        return (cache if cache is not None else default_ansi_cache).lookup(self)

    def __str__(self) -> str:
        return Color.serialize(self)


__all__ = [
    "AnsiColorCache",
    "Color",
    "default_ansi_cache",
    "rgb_to_ansi256",
]
