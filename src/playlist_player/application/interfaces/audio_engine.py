"""Port interface for the audio rendering engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ...domain.playback.value_objects import EngineRunState
    from .resource_loader import DecodedBuffer


class Voice(ABC):
    """One-shot playable unit; once started it cannot be started again."""

    @abstractmethod
    def bind(self, buffer: "DecodedBuffer") -> None:
        """Attach decoded audio to this voice."""
        ...

    @abstractmethod
    def start(self, at_time: float) -> None:
        """Begin playback at engine time *at_time* (a past time means now)."""
        ...

    @abstractmethod
    def stop(self) -> None:
        """Halt playback; the ended callback still fires."""
        ...

    @abstractmethod
    def on_ended(self, callback: Callable[[], None]) -> None:
        """Set the callback invoked when the voice finishes or is stopped."""
        ...

    @property
    @abstractmethod
    def has_fired(self) -> bool:
        """True once ``start`` has been called."""
        ...


class GainControl(ABC):
    """Gain stage between a voice and the engine output."""

    @abstractmethod
    def ramp_to(self, value: float, at_time: float, time_constant: float) -> None:
        """Approach *value* exponentially from *at_time* with *time_constant*."""
        ...


class AudioEngine(ABC):
    """Interface for voice creation, routing, and the engine clock."""

    @abstractmethod
    def create_voice(self, loop: bool = False) -> Voice:
        ...

    @abstractmethod
    def create_gain_control(self) -> GainControl:
        ...

    @abstractmethod
    def connect(self, source: Any, destination: Any) -> None:
        """Route *source* into *destination* (voice -> gain, gain -> output)."""
        ...

    @property
    @abstractmethod
    def output(self) -> Any:
        """The engine's final destination node."""
        ...

    @abstractmethod
    def clock_now(self) -> float:
        """Current engine time in seconds."""
        ...

    @property
    @abstractmethod
    def run_state(self) -> "EngineRunState":
        ...
