"""
Player - owns the decode lifecycle of a playback session.

Example:
    from asciiplay.player import MediaPlayer

    player = MediaPlayer()
    frame_set = await player.play("movie.mp4")   # frames keep arriving
    player.pause()
    player.resume()
    player.stop()
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from ..color import AnsiColorCache
from ..config import settings
from ..events import EventEmitter
from ..frames import FrameSet
from ..media import FFmpegMediaReader, MediaOptions, MediaReader, OpenCVMediaReader
from .state import PlayerState

if TYPE_CHECKING:
    from ..controller import Controller
    from ..dimension import Dimension

logger = logging.getLogger(__name__)


class Player(EventEmitter, ABC):
    """Three state playback machine (stopped, playing, paused).

    ``play`` starts decoding in the background and returns the FrameSet the
    decoder fills. The media reader is released once decoding completes,
    fails or the player is stopped.

    Events:
        ``"play"`` (file_path): decoding has started
        ``"pause"``, ``"resume"``, ``"stop"``: after the state changed
        ``"error"`` (exception): decoding failed, the player stops afterwards

    :param ansi_cache: Color cache handed to the decoded frames
    """

    def __init__(self, ansi_cache: AnsiColorCache | None = None):
        super().__init__()
        self._state = PlayerState.STOPPED
        self._ansi_cache = ansi_cache
        self._frame_set: FrameSet | None = None
        self._reader: MediaReader | None = None
        self._ingestion: asyncio.Task | None = None
        self._error: BaseException | None = None

        # The controller controlling this player (None until under control)
        self.controller: "Controller | None" = None

    @abstractmethod
    def get_media_reader(self, file_path: str | Path, options: MediaOptions | None = None) -> MediaReader:
        """Create the reader used to decode ``file_path``."""
        ...

    async def get_title(self, file_path: str | Path, options: MediaOptions | None = None) -> str:
        """Read the title of the media file."""
        reader = self.get_media_reader(file_path, options)
        try:
            return await reader.read_title()
        finally:
            reader.destroy()

    async def play(self, file_path: str | Path, options: MediaOptions | None = None) -> FrameSet:
        """Start decoding ``file_path``.

        Returns as soon as decoding has started; frames are added to the
        returned FrameSet as they are decoded and the set is finalized once
        the last frame was added.

        :param file_path: Path of the media file
        :param options: Decoder hints
        :return: The FrameSet filled by the decoder
        :raises RuntimeError: If the player is not stopped
        """
        if not self.stopped:
            raise RuntimeError("Player must be stopped before playing another file")

        reader = self.get_media_reader(file_path, options)
        frame_set = FrameSet()
        reader.on("frame", frame_set.add)
        reader.on("finish", lambda frames: frame_set.finalize())

        self._state = PlayerState.PLAYING
        self._frame_set = frame_set
        self._reader = reader
        self._error = None

        try:
            dimension = await reader.read_dimension()
        except BaseException:
            if self._reader is reader:
                self._release()
                self._state = PlayerState.STOPPED
            reader.destroy()
            raise

        if self._frame_set is not frame_set:
            reader.destroy()
            raise RuntimeError(f"Playback of {file_path} was stopped before decoding started")

        logger.debug(f"Decoding {file_path} at {dimension}")
        self._ingestion = asyncio.create_task(self._ingest(reader, dimension))
        self.emit("play", str(file_path))
        return frame_set

    async def _ingest(self, reader: MediaReader, dimension: "Dimension") -> None:
        try:
            await reader.read_frames(dimension)
        except asyncio.CancelledError:
            logger.debug(f"Decoding of {reader.file_path} cancelled")
            raise
        except Exception as e:
            logger.error(f"Decoding of {reader.file_path} failed: {e}")
            self._error = e
            self._ingestion = None
            self.emit("error", e)
            self.stop()
        finally:
            reader.destroy()
            if self._reader is reader:
                self._reader = None

    async def wait_for_ingestion(self) -> None:
        """Wait until the decoder has finished.

        :raises Exception: The decoding error, if decoding failed
        """
        task = self._ingestion
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        if self._error is not None:
            raise self._error

    def pause(self) -> bool:
        """Pause playback. Returns False unless the player was playing."""
        if not self.playing:
            return False
        self._state = PlayerState.PAUSED
        self.emit("pause")
        return True

    def resume(self) -> bool:
        """Resume paused playback. Returns False unless the player was paused."""
        if not self.paused:
            return False
        self._state = PlayerState.PLAYING
        self.emit("resume")
        return True

    def stop(self) -> bool:
        """Stop playback and release the frame set and decoder.

        :return: False if the player had already been stopped
        """
        if self.stopped:
            return False
        self._state = PlayerState.STOPPED
        self._release()
        self.emit("stop")
        return True

    def destroy(self) -> None:
        self.stop()
        self.emit("destroy")
        self.remove_all_listeners()

    def _release(self) -> None:
        if self._ingestion is not None and not self._ingestion.done():
            self._ingestion.cancel()
        self._ingestion = None
        if self._reader is not None:
            self._reader.destroy()
            self._reader = None
        self._frame_set = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def frame_set(self) -> FrameSet | None:
        """FrameSet of the current session (None when stopped)."""
        return self._frame_set

    @property
    def error(self) -> BaseException | None:
        """Decoding error of the last session, if any."""
        return self._error

    @property
    def playing(self) -> bool:
        return self._state is PlayerState.PLAYING

    @playing.setter
    def playing(self, playing: bool) -> None:
        # Forced transition, falsy values are ignored
        if playing:
            self._state = PlayerState.PLAYING

    @property
    def paused(self) -> bool:
        return self._state is PlayerState.PAUSED

    @paused.setter
    def paused(self, paused: bool) -> None:
        if paused:
            self._state = PlayerState.PAUSED

    @property
    def stopped(self) -> bool:
        return self._state is PlayerState.STOPPED

    @stopped.setter
    def stopped(self, stopped: bool) -> None:
        if stopped:
            self.stop()


class MediaPlayer(Player):
    """Player decoding with ffmpeg (default) or OpenCV.

    :param decoder: ``"ffmpeg"`` or ``"opencv"`` (default from settings)
    :param ansi_cache: Color cache handed to the decoded frames
    """

    def __init__(
        self,
        decoder: Literal["ffmpeg", "opencv"] | None = None,
        ansi_cache: AnsiColorCache | None = None,
    ):
        super().__init__(ansi_cache)
        self.decoder = decoder or settings.DECODER
        if self.decoder not in ("ffmpeg", "opencv"):
            raise ValueError(f"Unknown decoder: {self.decoder}")

    def get_media_reader(self, file_path: str | Path, options: MediaOptions | None = None) -> MediaReader:
        if self.decoder == "opencv":
            return OpenCVMediaReader(file_path, options, self._ansi_cache)
        return FFmpegMediaReader(file_path, options, self._ansi_cache)


__all__ = ["Player", "MediaPlayer"]
