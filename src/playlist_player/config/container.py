"""Dependency Injection Container

Builds the audio engine, resource loader, and track lists from settings.
Components are created on first access and cached for reuse.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.audio_engine import AudioEngine
    from ..application.interfaces.resource_loader import ResourceLoader
    from ..domain.playback.track import Track
    from ..domain.playback.track_list import TrackList
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. Engine and loader
    may be injected up front to replace the defaults.
    """

    settings: Settings
    _audio_engine: AudioEngine | None = None
    _resource_loader: ResourceLoader | None = None
    _track_lists: list[TrackList] = field(default_factory=list)

    @property
    def audio_engine(self) -> AudioEngine:
        if self._audio_engine is None:
            from ..infrastructure.audio.headless_engine import HeadlessAudioEngine

            self._audio_engine = HeadlessAudioEngine()
        return self._audio_engine

    @property
    def resource_loader(self) -> ResourceLoader:
        if self._resource_loader is None:
            from ..infrastructure.audio.http_loader import HttpResourceLoader

            self._resource_loader = HttpResourceLoader(self.settings.loader)
        return self._resource_loader

    def create_track(self, resource_ref: str, *, loop: bool | None = None) -> Track:
        from ..domain.playback.track import Track

        playback = self.settings.playback
        return Track(
            self.audio_engine,
            self.resource_loader,
            resource_ref,
            loop=playback.loop_tracks if loop is None else loop,
            preload=playback.preload,
            fade_time_constant=playback.fade_time_constant,
        )

    def build_track_list(
        self,
        resource_refs: Iterable[str],
        *,
        loop: bool | None = None,
        rng: random.Random | None = None,
    ) -> TrackList:
        from ..domain.playback.track_list import TrackList

        tracks = [self.create_track(ref, loop=loop) for ref in resource_refs]
        track_list = TrackList(
            tracks,
            rng=rng,
            skip_unloadable=self.settings.playback.skip_unloadable,
        )
        self._track_lists.append(track_list)
        return track_list

    async def shutdown(self) -> None:
        """Stop and detach track lists, then release the loader and engine."""
        for track_list in self._track_lists:
            track_list.stop()
            track_list.close()
        self._track_lists.clear()

        aclose = getattr(self._resource_loader, "aclose", None)
        if callable(aclose):
            await aclose()

        close = getattr(self._audio_engine, "close", None)
        if callable(close):
            close()
        logger.info(LogTemplates.CONTAINER_SHUTDOWN)


def create_container(settings: Settings | None = None) -> Container:
    """Create a container, loading settings from the environment if not given."""
    if settings is None:
        from .settings import get_settings

        settings = get_settings()
    return Container(settings=settings)
