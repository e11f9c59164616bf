"""Playback state machine and decode lifecycle."""

from .state import PlayerState
from .player import Player, MediaPlayer

__all__ = ["PlayerState", "Player", "MediaPlayer"]
