"""
asciiplay - Play videos in the terminal as colored ASCII art.

Frames are decoded by ffmpeg (or OpenCV), quantized to the 256 color ANSI
palette and painted into the terminal at a fixed refresh rate while the rest
of the file is still being decoded.

Example:
    import asyncio
    from asciiplay import Controller, MediaPlayer, TerminalDisplay

    async def main():
        controller = Controller(TerminalDisplay(), MediaPlayer())
        controller.on("stop", controller.destroy)
        await controller.play("movie.mp4")

    asyncio.run(main())
"""

__version__ = "0.1.0"

from .dimension import Dimension
from .color import AnsiColorCache, Color, default_ansi_cache, rgb_to_ansi256
from .events import EventEmitter, Subscription
from .frames import Frame, FrameSet, Paint, PixelFormat, TRANSPARENT_ANSI
from .media import FFmpegMediaReader, MediaOptions, MediaReader, OpenCVMediaReader
from .player import MediaPlayer, Player, PlayerState
from .display import Display, RefreshTicker, TerminalDisplay
from .controller import Controller
from .config import Settings, settings

__all__ = [
    "__version__",
    # Core types
    "Dimension",
    "Color",
    "AnsiColorCache",
    "default_ansi_cache",
    "rgb_to_ansi256",
    "EventEmitter",
    "Subscription",
    # Frames
    "Frame",
    "FrameSet",
    "Paint",
    "PixelFormat",
    "TRANSPARENT_ANSI",
    # Media
    "MediaOptions",
    "MediaReader",
    "FFmpegMediaReader",
    "OpenCVMediaReader",
    # Playback
    "Player",
    "MediaPlayer",
    "PlayerState",
    "Display",
    "TerminalDisplay",
    "RefreshTicker",
    "Controller",
    # Configuration
    "Settings",
    "settings",
]
