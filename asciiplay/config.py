"""Application configuration."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings.

    Every field can be overridden with an ``ASCIIPLAY_`` prefixed environment
    variable, e.g. ``ASCIIPLAY_REFRESH_RATE=40``. Command line options take
    precedence over both.
    """

    # Playback
    REFRESH_RATE: int = Field(default=10, ge=1)  # Milliseconds between rendered frames
    DECODER: Literal["ffmpeg", "opencv"] = "ffmpeg"

    # External tools
    FFMPEG_PATH: str = "ffmpeg"
    FFPROBE_PATH: str = "ffprobe"

    # Rendering
    FILL_CHARACTER: str = Field(default="#", min_length=1, max_length=1)
    ANSI_CACHE_SIZE: int | None = None  # None = unbounded

    # Logging
    LOG_LEVEL: str = "WARNING"

    model_config = {"env_prefix": "ASCIIPLAY_"}


settings = Settings()
