"""Audio adapters: engine, resource loading, and decoding."""

from playlist_player.infrastructure.audio.headless_engine import HeadlessAudioEngine
from playlist_player.infrastructure.audio.http_loader import HttpResourceLoader
from playlist_player.infrastructure.audio.wav_decoder import WavDecoder

__all__ = [
    "HeadlessAudioEngine",
    "HttpResourceLoader",
    "WavDecoder",
]
