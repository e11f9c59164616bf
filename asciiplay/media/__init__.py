"""Media decoders producing frames for playback.

- MediaReader: Abstract base class for all decoders
- FFmpegMediaReader: Decodes via ffprobe/ffmpeg subprocesses (default)
- OpenCVMediaReader: Decodes via cv2.VideoCapture
"""

from .reader import MediaOptions, MediaReader
from .ffmpeg_reader import FFmpegMediaReader
from .opencv_reader import OpenCVMediaReader

__all__ = [
    "MediaOptions",
    "MediaReader",
    "FFmpegMediaReader",
    "OpenCVMediaReader",
]
