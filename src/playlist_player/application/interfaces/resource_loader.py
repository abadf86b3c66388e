"""Port interface for fetching and decoding audio resources."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

from playlist_player.domain.shared.types import (
    ChannelCount,
    NonNegativeInt,
    ResourceRefStr,
    SampleRateHz,
    SampleWidthBytes,
)


class DecodedBuffer(BaseModel):
    """PCM audio ready to be bound to a voice."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    sample_rate: SampleRateHz = 44_100
    channels: ChannelCount = 2
    sample_width: SampleWidthBytes = 2
    frame_count: NonNegativeInt = 0

    @property
    def duration_seconds(self) -> float:
        return self.frame_count / self.sample_rate


class ResourceLoader(ABC):
    """Interface for turning a resource reference into decoded audio."""

    @abstractmethod
    async def fetch_and_decode(self, resource_ref: ResourceRefStr) -> DecodedBuffer:
        """Fetch and decode *resource_ref*.

        Raises:
            LoadFailure: FetchError on network failure, DecodeError on bad data.
        """
        ...
