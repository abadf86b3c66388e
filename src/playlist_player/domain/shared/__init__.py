"""
Shared Domain Kernel

Contains the event bus and exceptions shared across the package.
"""

from playlist_player.domain.shared.events import CancelToken, EventBus, PlaybackEvent
from playlist_player.domain.shared.exceptions import (
    DecodeError,
    DomainError,
    FetchError,
    InvalidIndexError,
    InvalidOperationError,
    InvalidStateTransitionError,
    LoadFailure,
    ValidationError,
)

__all__ = [
    "EventBus",
    "CancelToken",
    "PlaybackEvent",
    "DomainError",
    "ValidationError",
    "InvalidOperationError",
    "InvalidStateTransitionError",
    "InvalidIndexError",
    "LoadFailure",
    "FetchError",
    "DecodeError",
]
