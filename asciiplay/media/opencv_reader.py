"""OpenCV based media decoding."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import cv2

from ..color import AnsiColorCache
from ..dimension import Dimension
from ..frames import Frame
from .reader import MediaOptions, MediaReader

logger = logging.getLogger(__name__)


class OpenCVMediaReader(MediaReader):
    """MediaReader backed by ``cv2.VideoCapture``.

    Frames are produced as opaque RGB frames. Blocking reads are moved off the
    event loop, frame construction and notification stay on it. Codec hints
    are not supported by OpenCV and are ignored.
    """

    def __init__(
        self,
        file_path: str | Path,
        options: MediaOptions | None = None,
        ansi_cache: AnsiColorCache | None = None,
    ):
        super().__init__(file_path, options, ansi_cache)
        self._cap: cv2.VideoCapture | None = None
        self._read: asyncio.Future | None = None
        if self.codec or self.format:
            logger.debug(f"OpenCV ignores codec/format hints for {self.file_path}")

    def _open(self) -> cv2.VideoCapture:
        if self._cap is None or not self._cap.isOpened():
            self._cap = cv2.VideoCapture(self.file_path)
            if not self._cap.isOpened():
                self._cap = None
                raise RuntimeError(f"Failed to open video source: {self.file_path}")
        return self._cap

    async def read_dimension(self) -> Dimension:
        cap = self._open()
        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        return Dimension(width, height)

    async def read_frames(self, dimension: Dimension) -> list[Frame]:
        if dimension.area == 0:
            raise ValueError(f"Cannot decode frames with dimension {dimension}")

        cap = self._open()
        cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
        self.emit("start")

        frames: list[Frame] = []
        try:
            while not self.destroyed:
                # Tracked until the worker thread returns, see _release()
                self._read = asyncio.ensure_future(asyncio.to_thread(cap.read))
                ret, bgr = await asyncio.shield(self._read)
                self._read = None
                if not ret or self.destroyed:
                    break

                if (bgr.shape[1], bgr.shape[0]) != (dimension.width, dimension.height):
                    bgr = cv2.resize(
                        bgr, (dimension.width, dimension.height), interpolation=cv2.INTER_AREA
                    )
                rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)

                frame = Frame.opaque(
                    len(frames), rgb, dimension.width, dimension.height, self._ansi_cache
                )
                frames.append(frame)
                self.emit("frame", frame)
        finally:
            if self.destroyed:
                self._release()

        logger.debug(f"Decoded {len(frames)} frames from {self.file_path}")
        self.emit("finish", frames)
        return frames

    def destroy(self) -> None:
        super().destroy()
        self._release()

    def _release(self) -> None:
        read = self._read
        if read is not None and not read.done():
            # The capture must outlive the read running in the worker thread
            read.add_done_callback(lambda _: self._release())
            return
        self._read = None
        if self._cap is not None:
            self._cap.release()
            self._cap = None


__all__ = ["OpenCVMediaReader"]
