# ruff: noqa: N999
"""
Domain Layer

Contains pure playback logic organized by bounded contexts:
- shared/: Event bus, exceptions, message templates, and annotated types
- playback/: Track and TrackList state machines
"""

from playlist_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
