"""Player state machine states."""

from enum import Enum


class PlayerState(Enum):
    """Playback state machine.

    STOPPED is both the initial state and the end of every playback session;
    a stopped session cannot be resumed, only played again from the start.
    """

    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"
