"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from playlist_player.domain.shared.types import NonEmptyStr, ResourceRefStr

    class MyModel(BaseModel):
        label: NonEmptyStr
        resource_ref: ResourceRefStr
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

ResourceRefStr = Annotated[str, Field(min_length=1, max_length=4096)]
"""URL or filesystem path identifying an audio resource."""


# ── Audio constraints ───────────────────────────────────────────────

SampleRateHz = Annotated[int, Field(gt=0, le=768_000)]
"""Sample rate in Hz."""

ChannelCount = Annotated[int, Field(ge=1, le=32)]
"""Number of interleaved channels."""

SampleWidthBytes = Annotated[int, Field(ge=1, le=4)]
"""Bytes per sample per channel."""

TrackIndex = Annotated[int, Field(ge=0)]
"""Zero-based position in a track list."""


# ── Settings-specific constraints ──────────────────────────────────

TimeoutSeconds = Annotated[float, Field(ge=1.0, le=300.0)]
"""Network timeout in seconds, 1 to 300."""

FadeTimeConstant = Annotated[float, Field(gt=0.0, le=10.0)]
"""Gain ramp smoothing constant in seconds."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""


def utcnow() -> datetime:
    """Return a timezone-aware datetime in UTC."""
    return datetime.now(UTC)
