"""Streaming buffer between frame ingestion and the render consumer."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Iterable

from ..events import EventEmitter

if TYPE_CHECKING:
    from .frame import Frame


class FrameSet(EventEmitter):
    """FIFO of frames that still have to be displayed.

    The decoder appends frames with :meth:`add` and calls :meth:`finalize`
    once no more frames will follow. The display drains frames with
    :meth:`next` at its own pace. An empty set is not necessarily exhausted:
    only a finalized set without buffered frames is complete.

    Events:
        ``"add"`` (frame): after a frame was appended
        ``"next"`` (frame): after a frame was removed from the front
        ``"finalize"``: once, when the set gets finalized

    Example:
        frame_set = FrameSet()
        frame_set.add(first).add(second).finalize()
        while frame_set.has_next():
            display(frame_set.next())
    """

    def __init__(self, frames: Iterable["Frame"] | None = None):
        super().__init__()
        self._frames: deque["Frame"] = deque(frames or ())
        self._finalized = False
        self._total_length = len(self._frames)

    def add(self, frame: "Frame") -> "FrameSet":
        """Append ``frame``.

        :raises RuntimeError: If the set has been finalized
        """
        if self._finalized:
            raise RuntimeError("Cannot add to frame set which has been finalized")

        self._frames.append(frame)
        self._total_length += 1

        self.emit("add", frame)
        return self

    def finalize(self) -> "FrameSet":
        """Mark the set as complete. Repeated calls are ignored."""
        if self._finalized:
            return self

        self._finalized = True
        self.emit("finalize")
        return self

    def has_next(self) -> bool:
        return len(self._frames) > 0

    def next(self) -> "Frame":
        """Remove and return the frame at the front.

        :raises IndexError: If no frame is buffered
        """
        if not self._frames:
            raise IndexError("No more frames in set")

        frame = self._frames.popleft()
        self.emit("next", frame)
        return frame

    def sub_set(self, begin: int | None = None, end: int | None = None) -> "FrameSet":
        """Detached copy of a slice of the buffered frames.

        The copy inherits the finalized flag; its total length is the number
        of frames in the slice.
        """
        frames = list(self._frames)[begin:end]
        frame_set = FrameSet(frames)
        frame_set._finalized = self._finalized
        return frame_set

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def length(self) -> int:
        """Number of frames currently buffered."""
        return len(self._frames)

    @property
    def total_length(self) -> int:
        """Number of frames ever added."""
        return self._total_length

    @property
    def exhausted(self) -> bool:
        """Whether the set is finalized and fully drained."""
        return self._finalized and not self._frames

    def __len__(self) -> int:
        return len(self._frames)

    def __repr__(self) -> str:
        return (
            f"FrameSet(length={self.length}, total_length={self._total_length}, "
            f"finalized={self._finalized})"
        )


__all__ = ["FrameSet"]
