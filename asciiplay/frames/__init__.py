"""Frame pipeline: decoded frames, their paints and the streaming frame buffer.

- Frame: One decoded image, quantized onto a terminal cell grid on demand
- PixelFormat: RGBA (transparency aware) or RGB (opaque) pixel layouts
- Paint: Run-length encoded ANSI rendering of a frame for one viewport size
- FrameSet: FIFO buffer between the decoder and the display
"""

from .paint import Paint, TRANSPARENT_ANSI, FILL_CHARACTER, prominent_color
from .frame import Frame, PixelFormat
from .frame_set import FrameSet

__all__ = [
    "Frame",
    "PixelFormat",
    "Paint",
    "TRANSPARENT_ANSI",
    "FILL_CHARACTER",
    "prominent_color",
    "FrameSet",
]
