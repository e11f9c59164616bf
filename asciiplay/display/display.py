"""
Display - base class for render targets painting frames at a fixed rate.

A Display owns the consumer side of playback. Once a FrameSet is loaded and
the display is unfrozen, a RefreshTicker drains exactly one frame per tick and
paints it. When the loaded set is finalized and fully drained the display asks
its controller to stop.

Subclasses implement the drawing primitives:

- get_dimension(): Size of the area frames are painted into
- is_rendered(): Whether render() has set up the output
- is_showing_help(): Whether help is currently shown
- paint(frame, previous_frame): Draw one frame
- update(): Redraw title, status and content
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Callable

import psutil

from ..config import settings
from ..dimension import Dimension
from ..events import EventEmitter
from .ticker import RefreshTicker

if TYPE_CHECKING:
    from ..controller import Controller
    from ..frames import Frame, FrameSet

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "asciiplay"

StatusCallback = Callable[["Display", "Frame | None"], "object | None"]


def format_bytes(size: float) -> str:
    """Human readable byte count with one decimal, e.g. ``12.5MB``."""
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if abs(size) < 1024 or unit == "TB":
            return f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}TB"


def _frames_status(display: "Display", frame: "Frame | None") -> str | None:
    frame_set = display.frame_set
    if frame_set is None or not frame_set.finalized or frame_set.total_length == 0:
        return None
    current = frame_set.total_length - frame_set.length
    return f"{round(100 * current / frame_set.total_length)}%"


def _ram_status(display: "Display", frame: "Frame | None") -> str:
    used = psutil.Process(os.getpid()).memory_info().rss
    total = psutil.virtual_memory().total
    return f"{format_bytes(used)}/{format_bytes(total)}"


class Display(EventEmitter):
    """Base class for all render targets.

    Events:
        ``"destroy"``: the display released its resources

    :param refresh_rate: Milliseconds between two painted frames
    :param title: Title shown while nothing is loaded
    :param status: Initial status text
    """

    # Status label -> callback computing its value (None renders as "?")
    STATUSES: dict[str, StatusCallback] = {
        "Display Res": lambda display, frame: display.get_dimension(),
        "Media Res": lambda display, frame: frame.dimension if frame is not None else None,
        "Frames": _frames_status,
        "RAM": _ram_status,
        "Help": lambda display, frame: 'Press "?"',
    }

    def __init__(
        self,
        refresh_rate: int | None = None,
        title: str | None = None,
        status: str | None = None,
    ):
        super().__init__()
        self._refresh_rate = refresh_rate or settings.REFRESH_RATE
        self._default_title = title or DEFAULT_TITLE
        self._title = self._default_title
        self._status = status or ""
        self._frame_set: "FrameSet | None" = None
        self._current_frame: "Frame | None" = None
        self._frozen = True
        self._ticker = RefreshTicker(
            self._paint_next_frame, self._refresh_rate / 1000, on_error=self._on_tick_error
        )

        # The controller controlling this display (None until under control)
        self.controller: "Controller | None" = None

    # -------------------------------------------------------------------------
    # Drawing primitives
    # -------------------------------------------------------------------------

    def get_dimension(self) -> Dimension | None:
        """Size of the paintable area (None before rendering)."""
        raise NotImplementedError("Display.get_dimension must be implemented")

    def is_rendered(self) -> bool:
        raise NotImplementedError("Display.is_rendered must be implemented")

    def is_showing_help(self) -> bool:
        raise NotImplementedError("Display.is_showing_help must be implemented")

    def paint(self, frame: "Frame", previous_frame: "Frame | None") -> None:
        """Paint ``frame``. Only called while unfrozen and rendered.

        :param frame: Frame to paint
        :param previous_frame: Frame painted before (fallback for empty cells)
        """
        raise NotImplementedError("Display.paint must be implemented")

    def update(self) -> None:
        """Redraw title, status and content. Only called once rendered."""
        raise NotImplementedError("Display.update must be implemented")

    def render(self) -> "Display":
        """Prepare the output so frames can be painted. Does nothing by default."""
        return self

    def show_help(self) -> "Display":
        return self

    def hide_help(self) -> "Display":
        return self

    # -------------------------------------------------------------------------
    # Frame set handling
    # -------------------------------------------------------------------------

    def load(self, frame_set: "FrameSet") -> "Display":
        """Start painting the frames of ``frame_set`` at the refresh rate.

        :raises RuntimeError: If a frame set is already loaded
        """
        if self._frame_set is not None:
            raise RuntimeError("Existing frame set has not been unloaded")

        self._frame_set = frame_set
        self.frozen = False
        self._update_status()
        return self

    def unload(self) -> "Display":
        """Stop painting and drop the loaded frame set."""
        self.frozen = True
        self.title = None
        self._frame_set = None
        self._current_frame = None
        self._update_status()
        return self

    def destroy(self) -> None:
        self.unload()
        self.emit("destroy")
        self.remove_all_listeners()

    def _paint_next_frame(self) -> None:
        frame_set = self._frame_set
        if self._frozen or frame_set is None or not self.is_rendered():
            return

        # The set may get finalized after its last frame was painted
        if not frame_set.has_next():
            if frame_set.finalized:
                self._finish(frame_set)
            return

        previous_frame = self._current_frame
        frame = frame_set.next()
        self._current_frame = frame

        self._update_status(frame)
        self.paint(frame, previous_frame)

        if not frame_set.has_next() and frame_set.finalized:
            self._finish(frame_set)

    def _finish(self, frame_set: "FrameSet") -> None:
        logger.debug(f"Painted all {frame_set.total_length} frames")
        if self.controller is not None:
            self.controller.stop()
        else:
            self.unload()

    def _on_tick_error(self, error: Exception) -> None:
        self._frozen = True
        if self.controller is not None:
            self.controller.abort(error)

    def _update_status(self, frame: "Frame | None" = None) -> None:
        parts = []
        for label, callback in self.STATUSES.items():
            value = callback(self, frame)
            parts.append(f"{label}: {value if value is not None else '?'}")
        self.status = " | ".join(parts)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def frame_set(self) -> "FrameSet | None":
        return self._frame_set

    @property
    def current_frame(self) -> "Frame | None":
        """Frame painted last."""
        return self._current_frame

    @property
    def frozen(self) -> bool:
        """Whether painting is suspended. Unfreezing starts the refresh ticker."""
        return self._frozen

    @frozen.setter
    def frozen(self, frozen: bool) -> None:
        self._frozen = bool(frozen)
        if self._frozen:
            self._ticker.stop()
        else:
            self._ticker.start()

    @property
    def refresh_rate(self) -> int:
        """Milliseconds between two painted frames."""
        return self._refresh_rate

    @property
    def status(self) -> str:
        return self._status

    @status.setter
    def status(self, status: str | None) -> None:
        self._status = status or ""
        if self.is_rendered():
            self.update()

    @property
    def title(self) -> str:
        """Displayed title. Empty values fall back to the default title."""
        return self._title

    @title.setter
    def title(self, title: str | None) -> None:
        self._title = title or self._default_title
        if self.is_rendered():
            self.update()


__all__ = ["Display", "DEFAULT_TITLE", "format_bytes"]
