"""
Headless Audio Engine

Clock-driven AudioEngine that renders nothing: voices complete after their
buffer's duration on the asyncio loop clock. Used by the CLI and for
exercising playback sequencing without audio hardware.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from playlist_player.application.interfaces.audio_engine import AudioEngine, GainControl, Voice
from playlist_player.domain.playback.value_objects import EngineRunState
from playlist_player.domain.shared.exceptions import InvalidStateTransitionError
from playlist_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...application.interfaces.resource_loader import DecodedBuffer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GainRamp:
    """A single recorded gain automation event."""

    value: float
    at_time: float
    time_constant: float


class OutputNode:
    """Terminal node of the headless graph."""

    def __repr__(self) -> str:
        return "OutputNode()"


@dataclass(eq=False)
class HeadlessGainControl(GainControl):
    ramps: list[GainRamp] = field(default_factory=list)
    target: float = 1.0

    def ramp_to(self, value: float, at_time: float, time_constant: float) -> None:
        self.ramps.append(GainRamp(value=value, at_time=at_time, time_constant=time_constant))
        self.target = value


class HeadlessVoice(Voice):
    """Voice that ends via ``loop.call_later`` after the bound buffer's duration."""

    def __init__(self, engine: HeadlessAudioEngine, loop: bool = False) -> None:
        self._engine = engine
        self._loop_playback = loop
        self._buffer: DecodedBuffer | None = None
        self._callback: Callable[[], None] | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._fired = False
        self._finished = False
        self.started_at: float | None = None

    @property
    def loop(self) -> bool:
        return self._loop_playback

    @property
    def has_fired(self) -> bool:
        return self._fired

    @property
    def is_active(self) -> bool:
        return self._fired and not self._finished

    def bind(self, buffer: DecodedBuffer) -> None:
        self._buffer = buffer

    def on_ended(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def start(self, at_time: float) -> None:
        if self._fired:
            raise InvalidStateTransitionError(
                operation="start",
                current_state="fired",
                message=ErrorMessages.VOICE_ALREADY_FIRED,
            )
        if self._buffer is None:
            raise InvalidStateTransitionError(
                operation="start",
                current_state="unbound",
                message=ErrorMessages.VOICE_NOT_BOUND,
            )
        if self._engine.run_state is EngineRunState.CLOSED:
            raise InvalidStateTransitionError(
                operation="start",
                current_state=EngineRunState.CLOSED.value,
                message=ErrorMessages.ENGINE_CLOSED,
            )

        self._fired = True
        now = self._engine.clock_now()
        self.started_at = max(at_time, now)
        if self._loop_playback:
            return

        delay = (self.started_at - now) + self._buffer.duration_seconds
        self._timer = self._engine.event_loop.call_later(delay, self._finish)
        logger.debug(LogTemplates.VOICE_SCHEDULED, delay)

    def stop(self) -> None:
        if not self._fired or self._finished:
            return
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        # Completion is delivered asynchronously, as real engines do.
        self._engine.event_loop.call_soon(self._finish)

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._timer = None
        if self._callback is not None:
            self._callback()


class HeadlessAudioEngine(AudioEngine):
    """AudioEngine whose clock is the running asyncio loop's clock.

    Must be created inside a running event loop.
    """

    def __init__(self) -> None:
        self._event_loop = asyncio.get_running_loop()
        self._epoch = self._event_loop.time()
        self._run_state = EngineRunState.RUNNING
        self._output = OutputNode()
        self.connections: list[tuple[Any, Any]] = []
        self.voices: list[HeadlessVoice] = []
        logger.debug(LogTemplates.ENGINE_CREATED)

    @property
    def event_loop(self) -> asyncio.AbstractEventLoop:
        return self._event_loop

    @property
    def output(self) -> OutputNode:
        return self._output

    @property
    def run_state(self) -> EngineRunState:
        return self._run_state

    def clock_now(self) -> float:
        return self._event_loop.time() - self._epoch

    def create_voice(self, loop: bool = False) -> HeadlessVoice:
        voice = HeadlessVoice(self, loop=loop)
        self.voices.append(voice)
        return voice

    def create_gain_control(self) -> HeadlessGainControl:
        return HeadlessGainControl()

    def connect(self, source: Any, destination: Any) -> None:
        self.connections.append((source, destination))

    def suspend(self) -> None:
        self._set_run_state(EngineRunState.SUSPENDED)

    def resume(self) -> None:
        self._set_run_state(EngineRunState.RUNNING)

    def close(self) -> None:
        """Close the engine and halt every active voice."""
        for voice in self.voices:
            if voice.is_active:
                voice.stop()
        self._set_run_state(EngineRunState.CLOSED)

    def _set_run_state(self, state: EngineRunState) -> None:
        if self._run_state is EngineRunState.CLOSED and state is not EngineRunState.CLOSED:
            raise InvalidStateTransitionError(
                operation=state.value,
                current_state=EngineRunState.CLOSED.value,
                message=ErrorMessages.ENGINE_CLOSED,
            )
        if state is self._run_state:
            return
        logger.debug(LogTemplates.ENGINE_STATE_CHANGED, self._run_state.value, state.value)
        self._run_state = state
