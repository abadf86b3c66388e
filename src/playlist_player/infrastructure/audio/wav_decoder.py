"""Decode RIFF/WAVE payloads into DecodedBuffer instances."""

from __future__ import annotations

import io
import wave

from playlist_player.application.interfaces.resource_loader import DecodedBuffer
from playlist_player.domain.shared.exceptions import DecodeError
from playlist_player.domain.shared.messages import ErrorMessages


class WavDecoder:
    """Decoder for uncompressed PCM WAV data."""

    def decode(self, data: bytes, resource_ref: str) -> DecodedBuffer:
        if not data:
            raise DecodeError(resource_ref, ErrorMessages.DECODE_EMPTY)

        try:
            with wave.open(io.BytesIO(data), "rb") as reader:
                frame_count = reader.getnframes()
                return DecodedBuffer(
                    data=reader.readframes(frame_count),
                    sample_rate=reader.getframerate(),
                    channels=reader.getnchannels(),
                    sample_width=reader.getsampwidth(),
                    frame_count=frame_count,
                )
        except (wave.Error, EOFError, ValueError) as e:
            raise DecodeError(
                resource_ref,
                ErrorMessages.DECODE_INVALID_WAV.format(detail=e),
                cause=e,
            ) from e
