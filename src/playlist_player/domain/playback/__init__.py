"""
Playback Bounded Context

Per-resource load/play state machine and playback-head sequencing.
"""

from playlist_player.domain.playback.events import (
    HeadMoved,
    TrackEnded,
    TrackListExhausted,
    TrackListShuffled,
    TrackLoaded,
    TrackLoadFailed,
    TrackStarted,
    TrackStopped,
)
from playlist_player.domain.playback.track import Track
from playlist_player.domain.playback.track_list import TrackList
from playlist_player.domain.playback.value_objects import (
    EngineRunState,
    LoadState,
    PlayState,
    TrackFinishReason,
    TrackListTopic,
    TrackTopic,
)

__all__ = [
    # Entities
    "Track",
    "TrackList",
    # Value Objects
    "LoadState",
    "PlayState",
    "EngineRunState",
    "TrackFinishReason",
    "TrackTopic",
    "TrackListTopic",
    # Events
    "TrackLoaded",
    "TrackLoadFailed",
    "TrackStarted",
    "TrackStopped",
    "TrackEnded",
    "HeadMoved",
    "TrackListShuffled",
    "TrackListExhausted",
]
