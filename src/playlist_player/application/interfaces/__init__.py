"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the playback domain
and infrastructure adapters. These are the "ports" in hexagonal
architecture.
"""

from playlist_player.application.interfaces.audio_engine import AudioEngine, GainControl, Voice
from playlist_player.application.interfaces.resource_loader import DecodedBuffer, ResourceLoader

__all__ = [
    "AudioEngine",
    "Voice",
    "GainControl",
    "ResourceLoader",
    "DecodedBuffer",
]
