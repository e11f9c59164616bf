"""FFmpeg based media decoding.

Metadata is read with ``ffprobe``. Frames are decoded by an ``ffmpeg`` process
writing raw RGBA pixels to its stdout, which is consumed frame by frame so
frames become available while the file is still being decoded.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from ..color import AnsiColorCache
from ..config import settings
from ..dimension import Dimension
from ..frames import Frame, PixelFormat
from .reader import MediaOptions, MediaReader

logger = logging.getLogger(__name__)


class FFmpegMediaReader(MediaReader):
    """MediaReader backed by the ``ffmpeg`` and ``ffprobe`` executables.

    :param file_path: Path of the media file
    :param options: Decoder hints (passed as ``-c:v`` and ``-f`` input options)
    :param ansi_cache: Color cache handed to the decoded frames
    :param ffmpeg_path: ffmpeg executable (default from settings)
    :param ffprobe_path: ffprobe executable (default from settings)
    """

    def __init__(
        self,
        file_path: str | Path,
        options: MediaOptions | None = None,
        ansi_cache: AnsiColorCache | None = None,
        *,
        ffmpeg_path: str | None = None,
        ffprobe_path: str | None = None,
    ):
        super().__init__(file_path, options, ansi_cache)
        self._ffmpeg_path = ffmpeg_path or settings.FFMPEG_PATH
        self._ffprobe_path = ffprobe_path or settings.FFPROBE_PATH
        self._probe_cache: dict[str, Any] | None = None
        self._probe_process: asyncio.subprocess.Process | None = None
        self._run_process: asyncio.subprocess.Process | None = None

    # -------------------------------------------------------------------------
    # MediaReader
    # -------------------------------------------------------------------------

    async def read_dimension(self) -> Dimension:
        data = await self._probe()
        streams = data.get("streams") or []
        video = next((s for s in streams if s.get("codec_type") == "video"), None)
        if video is None:
            raise RuntimeError(f"No video stream found in {self.file_path}")
        return Dimension(video.get("width"), video.get("height"))

    async def read_title(self) -> str:
        default_title = await super().read_title()
        data = await self._probe()
        tags = (data.get("format") or {}).get("tags") or {}
        return tags.get("title") or default_title

    async def read_frames(self, dimension: Dimension) -> list[Frame]:
        if self._run_process is not None:
            self._kill(self._run_process)

        frame_size = dimension.area * PixelFormat.RGBA.stride
        if frame_size == 0:
            raise ValueError(f"Cannot decode frames with dimension {dimension}")

        self._run_process = process = await asyncio.create_subprocess_exec(
            *self.build_command(dimension),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stderr_task = asyncio.create_task(process.stderr.read())
        self.emit("start")

        frames: list[Frame] = []
        try:
            while True:
                try:
                    chunk = await process.stdout.readexactly(frame_size)
                except asyncio.IncompleteReadError as e:
                    if e.partial:
                        logger.warning(f"Discarding {len(e.partial)} trailing bytes of {self.file_path}")
                    break

                frame = Frame(
                    len(frames),
                    chunk,
                    dimension.width,
                    dimension.height,
                    PixelFormat.RGBA,
                    self._ansi_cache,
                )
                frames.append(frame)
                self.emit("frame", frame)

            return_code = await process.wait()
            stderr = (await stderr_task).decode(errors="replace").strip()
        finally:
            if not stderr_task.done():
                stderr_task.cancel()
            self._kill(process)
            self._run_process = None

        if return_code != 0:
            raise RuntimeError(f"ffmpeg failed with exit code {return_code}: {stderr}")

        logger.debug(f"Decoded {len(frames)} frames from {self.file_path}")
        self.emit("finish", frames)
        return frames

    def destroy(self) -> None:
        self._probe_cache = None
        if self._probe_process is not None:
            self._kill(self._probe_process)
            self._probe_process = None
        if self._run_process is not None:
            self._kill(self._run_process)
            self._run_process = None
        super().destroy()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def build_command(self, dimension: Dimension) -> list[str]:
        """ffmpeg arguments decoding the file to raw RGBA at ``dimension``."""
        command = [self._ffmpeg_path, "-v", "error", "-nostats"]
        if self.codec:
            command += ["-c:v", self.codec]
        if self.format:
            command += ["-f", self.format]
        command += [
            "-i", self.file_path,
            "-an",
            "-f", "rawvideo",
            "-pix_fmt", "rgba",
            "-s", str(dimension),
            "pipe:1",
        ]
        return command

    async def _probe(self) -> dict[str, Any]:
        """Run ffprobe once and cache its JSON output."""
        if self._probe_cache is not None:
            return self._probe_cache

        command = [
            self._ffprobe_path,
            "-v", "error",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
        ]
        if self.format:
            command += ["-f", self.format]
        command.append(self.file_path)

        self._probe_process = process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await process.communicate()
        finally:
            self._kill(process)
            self._probe_process = None

        if process.returncode != 0:
            raise RuntimeError(f"ffprobe failed: {stderr.decode(errors='replace').strip()}")
        try:
            self._probe_cache = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Failed to parse ffprobe output: {e}") from e
        return self._probe_cache

    @staticmethod
    def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass


__all__ = ["FFmpegMediaReader"]
