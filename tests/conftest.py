import asyncio
from collections.abc import Callable

import pytest

from playlist_player.application.interfaces.audio_engine import AudioEngine, GainControl, Voice
from playlist_player.application.interfaces.resource_loader import DecodedBuffer, ResourceLoader
from playlist_player.domain.playback.track import Track
from playlist_player.domain.playback.value_objects import EngineRunState
from playlist_player.domain.shared.exceptions import InvalidStateTransitionError, LoadFailure

# ============================================================================
# Engine Test Doubles
# ============================================================================


class RecordingVoice(Voice):
    """Voice that records calls; completion is triggered by the test via finish()."""

    def __init__(self, loop: bool = False) -> None:
        self.loop = loop
        self.buffer: DecodedBuffer | None = None
        self.start_times: list[float] = []
        self.stop_count = 0
        self._callback: Callable[[], None] | None = None

    @property
    def has_fired(self) -> bool:
        return bool(self.start_times)

    @property
    def is_active(self) -> bool:
        return self.has_fired and self.stop_count == 0

    def bind(self, buffer: DecodedBuffer) -> None:
        self.buffer = buffer

    def start(self, at_time: float) -> None:
        if self.start_times:
            raise InvalidStateTransitionError("start", "fired")
        self.start_times.append(at_time)

    def stop(self) -> None:
        self.stop_count += 1

    def on_ended(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def finish(self) -> None:
        """Simulate the engine signalling the end of this voice."""
        assert self._callback is not None
        self._callback()


class RecordingGain(GainControl):
    def __init__(self) -> None:
        self.ramps: list[tuple[float, float, float]] = []

    def ramp_to(self, value: float, at_time: float, time_constant: float) -> None:
        self.ramps.append((value, at_time, time_constant))


class RecordingEngine(AudioEngine):
    """AudioEngine with a manually advanced clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self.state = EngineRunState.RUNNING
        self.voices: list[RecordingVoice] = []
        self.gains: list[RecordingGain] = []
        self.connections: list[tuple[object, object]] = []
        self._output = object()

    @property
    def output(self) -> object:
        return self._output

    @property
    def run_state(self) -> EngineRunState:
        return self.state

    def clock_now(self) -> float:
        return self.now

    def create_voice(self, loop: bool = False) -> RecordingVoice:
        voice = RecordingVoice(loop)
        self.voices.append(voice)
        return voice

    def create_gain_control(self) -> RecordingGain:
        gain = RecordingGain()
        self.gains.append(gain)
        return gain

    def connect(self, source: object, destination: object) -> None:
        self.connections.append((source, destination))

    def active_voices(self) -> list[RecordingVoice]:
        return [voice for voice in self.voices if voice.is_active]

    @property
    def start_count(self) -> int:
        return sum(len(voice.start_times) for voice in self.voices)


# ============================================================================
# Loader Test Doubles
# ============================================================================


def make_buffer(seconds: float = 2.0, sample_rate: int = 8000) -> DecodedBuffer:
    frames = int(seconds * sample_rate)
    return DecodedBuffer(
        data=b"\x00\x00" * frames,
        sample_rate=sample_rate,
        channels=1,
        sample_width=2,
        frame_count=frames,
    )


class FakeResourceLoader(ResourceLoader):
    """Loader that counts calls; set ``gated`` to hold fetches until release()."""

    def __init__(self, *, gated: bool = False, seconds: float = 2.0) -> None:
        self.gated = gated
        self.seconds = seconds
        self.calls: list[str] = []
        self.failures: dict[str, Exception] = {}
        self._gates: dict[str, asyncio.Future[DecodedBuffer]] = {}

    async def fetch_and_decode(self, resource_ref: str) -> DecodedBuffer:
        self.calls.append(resource_ref)
        if self.gated:
            gate = asyncio.get_running_loop().create_future()
            self._gates[resource_ref] = gate
            return await gate
        if resource_ref in self.failures:
            raise self.failures[resource_ref]
        return make_buffer(self.seconds)

    def release(self, resource_ref: str, error: Exception | None = None) -> None:
        gate = self._gates.pop(resource_ref)
        if error is not None:
            gate.set_exception(error)
        else:
            gate.set_result(make_buffer(self.seconds))

    def fail(self, resource_ref: str, reason: str = "boom") -> None:
        self.failures[resource_ref] = LoadFailure(resource_ref, reason)


async def settle(rounds: int = 5) -> None:
    """Let pending tasks and future callbacks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def loader():
    return FakeResourceLoader()


@pytest.fixture
def gated_loader():
    return FakeResourceLoader(gated=True)


@pytest.fixture
def make_track(engine, loader):
    """Factory for tracks sharing the recording engine and fake loader."""

    def _make(resource_ref: str = "https://example.com/a.wav", **kwargs) -> Track:
        return Track(engine, kwargs.pop("loader", loader), resource_ref, **kwargs)

    return _make


@pytest.fixture
def settled():
    """Awaitable helper that drains pending loop callbacks."""
    return settle


@pytest.fixture
def buffer_factory():
    return make_buffer


@pytest.fixture
def short_loader():
    """Loader whose buffers last 20ms, for tests on a real clock."""
    return FakeResourceLoader(seconds=0.02)
