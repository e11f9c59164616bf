"""Base class for media decoders.

A MediaReader extracts the title, the source dimension and the decoded frames
from a media file. Frames are announced one by one as they are decoded, so a
consumer can start displaying before the whole file has been read.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..color import AnsiColorCache
from ..events import EventEmitter

if TYPE_CHECKING:
    from ..dimension import Dimension
    from ..frames import Frame


@dataclass(frozen=True)
class MediaOptions:
    """Decoder hints.

    Attributes:
        codec: Video codec to decode with (None = derive from the file)
        format: Container format of the file (None = derive from the file)
    """

    codec: str | None = None
    format: str | None = None


class MediaReader(EventEmitter, ABC):
    """Reads the information needed for playback from a media file.

    Events:
        ``"start"``: decoding of frames has begun
        ``"frame"`` (frame): a frame has been decoded
        ``"finish"`` (frames): all frames have been decoded
        ``"destroy"``: the reader released its resources

    :param file_path: Path of the media file
    :param options: Decoder hints
    :param ansi_cache: Color cache handed to the decoded frames
    """

    def __init__(
        self,
        file_path: str | Path,
        options: MediaOptions | None = None,
        ansi_cache: AnsiColorCache | None = None,
    ):
        super().__init__()
        options = options or MediaOptions()
        self._file_path = str(file_path)
        self._codec = options.codec
        self._format = options.format
        self._ansi_cache = ansi_cache
        self._destroyed = False

    @abstractmethod
    async def read_dimension(self) -> "Dimension":
        """Read the source dimension of the media."""
        ...

    @abstractmethod
    async def read_frames(self, dimension: "Dimension") -> list["Frame"]:
        """Decode all frames, scaled to ``dimension``.

        Implementations emit ``"start"``, then ``"frame"`` for every frame in
        order and finally ``"finish"`` with the complete list.

        :param dimension: Size the frames are decoded at
        :return: All decoded frames
        """
        ...

    async def read_title(self) -> str:
        """Read the media title. Defaults to the file name."""
        return Path(self._file_path).name

    def destroy(self) -> None:
        """Release decoder resources and drop all listeners."""
        self._destroyed = True
        self.emit("destroy")
        self.remove_all_listeners()

    @property
    def codec(self) -> str | None:
        return self._codec

    @property
    def format(self) -> str | None:
        return self._format

    @property
    def file_path(self) -> str:
        return self._file_path

    @property
    def destroyed(self) -> bool:
        return self._destroyed


__all__ = ["MediaOptions", "MediaReader"]
