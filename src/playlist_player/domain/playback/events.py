"""Event payloads for the playback bounded context."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from playlist_player.domain.playback.value_objects import TrackFinishReason
from playlist_player.domain.shared.events import PlaybackEvent
from playlist_player.domain.shared.types import (
    NonNegativeFloat,
    NonNegativeInt,
    ResourceRefStr,
    TrackIndex,
)


class TrackEvent(PlaybackEvent):
    """Base class for events published by a Track.

    ``track`` carries the publishing Track itself so subscribers can compare
    identities; it is excluded from serialization.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    resource_ref: ResourceRefStr
    track: Any = Field(default=None, exclude=True, repr=False)


class TrackLoaded(TrackEvent):
    duration_seconds: NonNegativeFloat = 0.0


class TrackLoadFailed(TrackEvent):
    reason: str = ""
    error_code: str = ""


class TrackStarted(TrackEvent):
    play_cycle: NonNegativeInt = 0
    engine_time: float = 0.0


class TrackStopped(TrackEvent):
    play_cycle: NonNegativeInt = 0


class TrackEnded(TrackEvent):
    play_cycle: NonNegativeInt = 0
    reason: TrackFinishReason = TrackFinishReason.COMPLETED


class HeadMoved(PlaybackEvent):
    previous_index: TrackIndex
    index: TrackIndex
    resource_ref: ResourceRefStr


class TrackListShuffled(PlaybackEvent):
    track_count: NonNegativeInt
    player_head: TrackIndex | None = None


class TrackListExhausted(PlaybackEvent):
    last_index: TrackIndex
    last_resource_ref: ResourceRefStr
