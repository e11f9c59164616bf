"""
Controller - maps user commands to player and display transitions.

Example:
    from asciiplay import Controller, MediaPlayer, TerminalDisplay

    controller = Controller(TerminalDisplay(), MediaPlayer())
    controller.on("stop", controller.destroy)
    await controller.play("movie.mp4")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from . import files
from .events import EventEmitter
from .media import MediaOptions

if TYPE_CHECKING:
    from .display import Display
    from .frames import FrameSet
    from .player import Player

logger = logging.getLogger(__name__)


class Controller(EventEmitter):
    """Keeps a :class:`Player` and a :class:`Display` in lockstep.

    Events:
        ``"play"`` (file_path, title, options): before decoding starts
        ``"pause"``, ``"resume"``, ``"stop"``: after a successful transition
        ``"error"`` (exception): playback failed after it was started
        ``"destroy"``: display and player were destroyed

    :param display: Render target
    :param player: Playback state machine
    """

    def __init__(self, display: "Display", player: "Player"):
        super().__init__()
        display.controller = self
        player.controller = self

        self._display = display
        self._player = player
        self._destroyed = False

        player.on("error", self.abort)

    async def play(self, file_path: str | Path, options: MediaOptions | None = None) -> "FrameSet":
        """Play the media file at ``file_path``.

        The returned FrameSet is loaded into the display right away, so frames
        are painted while the rest of the file is still being decoded.

        :param file_path: Path of the media file
        :param options: Decoder hints
        :return: The FrameSet being played
        :raises RuntimeError: If the player is not stopped
        :raises FileNotFoundError: If ``file_path`` is not a regular file
        """
        options = options or MediaOptions()
        if not self._player.stopped:
            raise RuntimeError("Player must be stopped before playing another file")

        if not await files.is_file(file_path):
            raise FileNotFoundError(f"Cannot play invalid file path: {file_path}")

        title = await self._player.get_title(file_path, options)
        self._display.title = title
        logger.info(f"Playing {file_path} ({title})")

        self.emit("play", str(file_path), title, options)

        frame_set = await self._player.play(file_path, options)
        self._display.render().load(frame_set)
        return frame_set

    def pause(self) -> bool:
        """Pause playback and freeze the display."""
        if not self._player.pause():
            return False

        self._display.frozen = True

        self.emit("pause")
        return True

    def resume(self) -> bool:
        """Resume playback and restart painting."""
        if not self._player.resume():
            return False

        self._display.frozen = False

        self.emit("resume")
        return True

    def stop(self) -> bool:
        """Stop playback and unload the display.

        :return: False if the player had already been stopped
        """
        was_stopped = self._player.stopped

        self._player.stopped = True
        self._display.unload()

        if was_stopped:
            return False

        self.emit("stop")
        return True

    def help(self) -> bool:
        """Toggle the help overlay.

        :return: True if help is shown now
        """
        was_showing = self._display.is_showing_help()
        if was_showing:
            self._display.hide_help()
        else:
            self._display.show_help()
        return not was_showing

    def abort(self, error: Exception) -> None:
        """End playback because of ``error``."""
        logger.error(f"Playback aborted: {error}")
        self.emit("error", error)
        self.stop()

    def destroy(self) -> None:
        """Destroy display and player. Repeated calls are ignored."""
        if self._destroyed:
            return
        self._destroyed = True

        self._display.destroy()
        self._player.destroy()

        self.emit("destroy")
        self.remove_all_listeners()

    @property
    def display(self) -> "Display":
        return self._display

    @property
    def player(self) -> "Player":
        return self._player

    @property
    def destroyed(self) -> bool:
        return self._destroyed


__all__ = ["Controller"]
