"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

from enum import Enum, StrEnum


class LoadState(Enum):
    """Load axis of the track state machine.

    State transitions:
    - UNLOADED -> LOADING (load requested)
    - LOADING -> LOADED (fetch and decode succeeded)
    - LOADING -> UNLOADED (fetch or decode failed, load may be retried)
    """

    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"

    def can_transition_to(self, target: LoadState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            LoadState.UNLOADED: {LoadState.LOADING},
            LoadState.LOADING: {LoadState.LOADED, LoadState.UNLOADED},
            LoadState.LOADED: set(),
        }
        return target in valid_transitions.get(self, set())


class PlayState(Enum):
    """Play axis of the track state machine."""

    STOPPED = "stopped"
    PLAYING = "playing"

    @property
    def is_playing(self) -> bool:
        return self == PlayState.PLAYING


class EngineRunState(Enum):
    """Run state reported by an audio engine."""

    RUNNING = "running"
    SUSPENDED = "suspended"
    CLOSED = "closed"


class TrackFinishReason(Enum):
    """Reasons a play cycle can end."""

    COMPLETED = "completed"
    STOPPED = "stopped"


class TrackTopic(StrEnum):
    """Topics published by a Track."""

    LOADED = "loaded"
    LOAD_FAILED = "load_failed"
    STARTED = "started"
    STOPPED = "stopped"
    ENDED = "ended"


class TrackListTopic(StrEnum):
    """Topics published by a TrackList."""

    HEAD_MOVED = "head_moved"
    SHUFFLED = "shuffled"
    EXHAUSTED = "exhausted"
