"""Track: load/play state machine for a single audio resource."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Final

from playlist_player.domain.playback.events import (
    TrackEnded,
    TrackLoaded,
    TrackLoadFailed,
    TrackStarted,
    TrackStopped,
)
from playlist_player.domain.playback.value_objects import (
    EngineRunState,
    LoadState,
    PlayState,
    TrackFinishReason,
    TrackTopic,
)
from playlist_player.domain.shared.events import CancelToken, EventBus, EventHandler
from playlist_player.domain.shared.exceptions import (
    InvalidStateTransitionError,
    LoadFailure,
    ValidationError,
)
from playlist_player.domain.shared.messages import (
    TRANSPORT_NOOP_EXTRA,
    ErrorMessages,
    LogTemplates,
)

if TYPE_CHECKING:
    from ...application.interfaces.audio_engine import AudioEngine, GainControl, Voice
    from ...application.interfaces.resource_loader import DecodedBuffer, ResourceLoader

logger = logging.getLogger(__name__)

DEFAULT_FADE_TIME_CONSTANT: Final[float] = 0.1


class Track:
    """A single playable resource owning one voice and one gain control.

    The load axis (UNLOADED -> LOADING -> LOADED) and the play axis
    (STOPPED <-> PLAYING) are tracked separately; a track never plays
    before it is loaded. Observers subscribe to :class:`TrackTopic` topics
    on :attr:`events`.

    With ``preload=True`` loading starts at construction when an event loop
    is running; otherwise the track stays UNLOADED until the first
    :meth:`load` call.
    """

    def __init__(
        self,
        engine: AudioEngine,
        loader: ResourceLoader,
        resource_ref: str,
        *,
        loop: bool = False,
        preload: bool = False,
        fade_time_constant: float = DEFAULT_FADE_TIME_CONSTANT,
    ) -> None:
        if not resource_ref or not resource_ref.strip():
            raise ValidationError(ErrorMessages.EMPTY_RESOURCE_REF, field="resource_ref")
        if fade_time_constant <= 0:
            raise ValidationError(
                ErrorMessages.INVALID_FADE_TIME_CONSTANT, field="fade_time_constant"
            )

        self._engine = engine
        self._loader = loader
        self._resource_ref = resource_ref
        self._loop = loop
        self._fade_time_constant = fade_time_constant

        self._load_state = LoadState.UNLOADED
        self._play_state = PlayState.STOPPED
        self._start_offset = 0.0
        self._volume = 1.0
        self._buffer: DecodedBuffer | None = None
        self._load_future: asyncio.Future[Track] | None = None

        # Play cycles whose ended signal has not been published yet.
        self._play_cycle = 0
        self._open_cycles: dict[int, TrackFinishReason] = {}

        self.events = EventBus()

        self._gain: GainControl = engine.create_gain_control()
        engine.connect(self._gain, engine.output)
        self._voice: Voice = self._acquire_voice()

        if preload:
            self._preload()

    def __repr__(self) -> str:
        return (
            f"Track({self._resource_ref!r}, load_state={self._load_state.value}, "
            f"play_state={self._play_state.value})"
        )

    # ── Accessors ───────────────────────────────────────────────────

    @property
    def resource_ref(self) -> str:
        return self._resource_ref

    @property
    def loop(self) -> bool:
        return self._loop

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    @property
    def play_state(self) -> PlayState:
        return self._play_state

    @property
    def is_loaded(self) -> bool:
        return self._load_state is LoadState.LOADED

    @property
    def is_playing(self) -> bool:
        return self._play_state is PlayState.PLAYING

    @property
    def play_cycle(self) -> int:
        """Number of times this track has been started."""
        return self._play_cycle

    @property
    def start_offset(self) -> float:
        return self._start_offset

    @property
    def current_time(self) -> float:
        """Elapsed playback time derived from the start offset and the engine clock."""
        return self._start_offset + self._engine.clock_now()

    @property
    def duration_seconds(self) -> float | None:
        return self._buffer.duration_seconds if self._buffer is not None else None

    @property
    def volume(self) -> float:
        """Last gain target requested (the engine may still be ramping towards it)."""
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self.set_volume(value)

    def set_volume(self, value: float) -> None:
        """Ramp the gain towards *value* using the fade time constant."""
        if not 0.0 <= value <= 1.0:
            raise ValidationError(ErrorMessages.INVALID_VOLUME.format(volume=value), field="volume")
        self._volume = value
        self._gain.ramp_to(value, self._engine.clock_now(), self._fade_time_constant)

    # ── Subscriptions ───────────────────────────────────────────────

    def subscribe(
        self,
        topic: TrackTopic,
        handler: EventHandler,
        *,
        once: bool = False,
        cancel_token: CancelToken | None = None,
    ) -> None:
        self.events.subscribe(topic, handler, once=once, cancel_token=cancel_token)

    def unsubscribe(self, topic: TrackTopic, handler: EventHandler) -> bool:
        return self.events.unsubscribe(topic, handler)

    # ── Loading ─────────────────────────────────────────────────────

    def load(self) -> asyncio.Future[Track]:
        """Fetch and decode the resource without blocking.

        Returns a future resolved with this track once it is loaded. While a
        load is in flight every caller receives the same future and the
        loader is not invoked again. Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()

        if self._load_state is LoadState.LOADED:
            logger.debug(LogTemplates.TRACK_ALREADY_LOADED, self._resource_ref)
            future: asyncio.Future[Track] = loop.create_future()
            future.set_result(self)
            return future

        if self._load_future is not None:
            logger.debug(LogTemplates.TRACK_LOAD_IN_FLIGHT, self._resource_ref)
            return self._load_future

        logger.debug(LogTemplates.TRACK_LOAD_REQUESTED, self._resource_ref)
        self._set_load_state(LoadState.LOADING)
        future = loop.create_future()
        # Failures are logged and published; callers that await still see them.
        future.add_done_callback(_mark_exception_retrieved)
        self._load_future = future
        loop.create_task(self._fetch(future))
        return future

    def _preload(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(LogTemplates.TRACK_PRELOAD_SKIPPED, self._resource_ref)
            return
        self.load()

    async def _fetch(self, future: asyncio.Future[Track]) -> None:
        try:
            buffer = await self._loader.fetch_and_decode(self._resource_ref)
        except asyncio.CancelledError:
            self._set_load_state(LoadState.UNLOADED)
            self._load_future = None
            future.cancel()
            raise
        except LoadFailure as e:
            self._fail_load(future, e)
            return
        except Exception as e:
            logger.exception(LogTemplates.TRACK_LOAD_FAILED, self._resource_ref, e)
            self._fail_load(
                future,
                LoadFailure(
                    self._resource_ref,
                    ErrorMessages.LOADER_UNEXPECTED.format(error=e),
                    cause=e,
                ),
            )
            return

        self._buffer = buffer
        self._voice.bind(buffer)
        self._set_load_state(LoadState.LOADED)
        self._load_future = None
        self.volume = 0.0
        logger.info(LogTemplates.TRACK_LOADED, self._resource_ref, buffer.duration_seconds)

        if not future.done():
            future.set_result(self)
        self.events.publish(
            TrackTopic.LOADED,
            TrackLoaded(
                resource_ref=self._resource_ref,
                track=self,
                duration_seconds=buffer.duration_seconds,
            ),
        )

    def _fail_load(self, future: asyncio.Future[Track], error: LoadFailure) -> None:
        self._set_load_state(LoadState.UNLOADED)
        self._load_future = None
        logger.warning(LogTemplates.TRACK_LOAD_FAILED, self._resource_ref, error.reason)

        if not future.done():
            future.set_exception(error)
        self.events.publish(
            TrackTopic.LOAD_FAILED,
            TrackLoadFailed(
                resource_ref=self._resource_ref,
                track=self,
                reason=error.reason,
                error_code=error.code,
            ),
        )

    # ── Transport ───────────────────────────────────────────────────

    def start(self) -> bool:
        """Start playback from the beginning.

        Has no effect unless the track is loaded and stopped. Returns True
        when playback was started.
        """
        if self._load_state is not LoadState.LOADED or self._play_state is PlayState.PLAYING:
            logger.debug(
                LogTemplates.TRACK_START_IGNORED,
                self._resource_ref,
                self._load_state.value,
                self._play_state.value,
                extra=TRANSPORT_NOOP_EXTRA,
            )
            return False

        if self._voice.has_fired:
            self._voice = self._acquire_voice()
            logger.debug(LogTemplates.TRACK_VOICE_REARMED, self._resource_ref)

        self._play_cycle += 1
        cycle = self._play_cycle
        self._open_cycles[cycle] = TrackFinishReason.COMPLETED
        self._voice.on_ended(functools.partial(self._on_voice_ended, cycle))

        now = self._engine.clock_now()
        start_offset = 0.0 - now
        try:
            self._voice.start(start_offset + now)
        except Exception:
            self._open_cycles.pop(cycle, None)
            self._play_cycle -= 1
            raise
        self._start_offset = start_offset
        self._play_state = PlayState.PLAYING
        self.volume = 1.0
        logger.info(LogTemplates.TRACK_STARTED, self._resource_ref, now)

        self.events.publish(
            TrackTopic.STARTED,
            TrackStarted(
                resource_ref=self._resource_ref,
                track=self,
                play_cycle=cycle,
                engine_time=now,
            ),
        )
        return True

    def stop(self) -> bool:
        """Fade out and halt playback.

        Has no effect unless the track is loaded, playing, and the engine is
        running. Returns True when playback was stopped.
        """
        run_state = self._engine.run_state
        if (
            self._load_state is not LoadState.LOADED
            or self._play_state is not PlayState.PLAYING
            or run_state is not EngineRunState.RUNNING
        ):
            logger.debug(
                LogTemplates.TRACK_STOP_IGNORED,
                self._resource_ref,
                self._load_state.value,
                self._play_state.value,
                run_state.value,
                extra=TRANSPORT_NOOP_EXTRA,
            )
            return False

        cycle = self._play_cycle
        self.volume = 0.0
        self._open_cycles[cycle] = TrackFinishReason.STOPPED
        self._voice.stop()
        self._start_offset = 0.0
        self._play_state = PlayState.STOPPED
        logger.info(LogTemplates.TRACK_STOPPED, self._resource_ref)

        self.events.publish(
            TrackTopic.STOPPED,
            TrackStopped(resource_ref=self._resource_ref, track=self, play_cycle=cycle),
        )
        return True

    def _on_voice_ended(self, cycle: int) -> None:
        reason = self._open_cycles.pop(cycle, None)
        if reason is None:
            logger.debug(LogTemplates.TRACK_STALE_ENDED, self._resource_ref, cycle)
            return

        if cycle == self._play_cycle and self._play_state is PlayState.PLAYING:
            self._play_state = PlayState.STOPPED

        logger.info(LogTemplates.TRACK_ENDED, self._resource_ref, reason.value)
        self.events.publish(
            TrackTopic.ENDED,
            TrackEnded(
                resource_ref=self._resource_ref,
                track=self,
                play_cycle=cycle,
                reason=reason,
            ),
        )

    def _set_load_state(self, target: LoadState) -> None:
        if not self._load_state.can_transition_to(target):
            raise InvalidStateTransitionError(
                operation=f"load_state->{target.value}",
                current_state=self._load_state.value,
            )
        self._load_state = target

    def _acquire_voice(self) -> Voice:
        voice = self._engine.create_voice(self._loop)
        self._engine.connect(voice, self._gain)
        if self._buffer is not None:
            voice.bind(self._buffer)
        return voice


def _mark_exception_retrieved(future: asyncio.Future[Track]) -> None:
    if not future.cancelled():
        future.exception()
