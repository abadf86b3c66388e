"""TrackList: playback-head sequencing over an ordered set of Tracks."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Iterator, Sequence

from playlist_player.domain.playback.events import (
    HeadMoved,
    TrackEnded,
    TrackListExhausted,
    TrackListShuffled,
)
from playlist_player.domain.playback.track import Track
from playlist_player.domain.playback.value_objects import (
    TrackFinishReason,
    TrackListTopic,
    TrackTopic,
)
from playlist_player.domain.shared.events import EventBus
from playlist_player.domain.shared.exceptions import InvalidIndexError
from playlist_player.domain.shared.messages import TRANSPORT_NOOP_EXTRA, LogTemplates

logger = logging.getLogger(__name__)


class TrackList:
    """Ordered collection of Tracks with a single playback head.

    Each Track's ``ended`` topic is wired to :meth:`next` once at
    construction, so completed tracks advance the head automatically.
    The list only drives Tracks through their public operations.
    """

    def __init__(
        self,
        tracks: Sequence[Track],
        *,
        rng: random.Random | None = None,
        skip_unloadable: bool = False,
    ) -> None:
        self._tracks: list[Track] = list(tracks)
        self._player_head = 0
        self._rng = rng or random.Random()
        self._skip_unloadable = skip_unloadable
        self._pending_start: Track | None = None
        # Last track this list started; its completion advances the head even
        # after shuffle() has moved it away from player_head.
        self._active_track: Track | None = None
        self._closed = False

        self.events = EventBus()

        for track in self._tracks:
            track.subscribe(TrackTopic.ENDED, self._on_track_ended)

        logger.debug(LogTemplates.LIST_CREATED, len(self._tracks))

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(tuple(self._tracks))

    # ── Accessors ───────────────────────────────────────────────────

    @property
    def tracks(self) -> tuple[Track, ...]:
        return tuple(self._tracks)

    @property
    def player_head(self) -> int | None:
        """Index of the current track, or None for an empty list."""
        return self._player_head if self._tracks else None

    @property
    def current_track(self) -> Track | None:
        if not self._tracks:
            return None
        return self._tracks[self._player_head]

    @property
    def is_empty(self) -> bool:
        return not self._tracks

    # ── Loading ─────────────────────────────────────────────────────

    def load(self, index: int) -> asyncio.Future[Track]:
        """Return a future resolved with the track at *index* once it is loaded.

        Out-of-range indices produce a future rejected with InvalidIndexError.
        """
        if not 0 <= index < len(self._tracks):
            future: asyncio.Future[Track] = asyncio.get_running_loop().create_future()
            future.set_exception(InvalidIndexError(index, len(self._tracks)))
            return future
        return self._tracks[index].load()

    # ── Transport ───────────────────────────────────────────────────

    def start(self) -> bool:
        """Start the current track, loading it first if necessary.

        Returns True if the track started immediately; a deferred start
        returns False and happens when the load completes.
        """
        track = self.current_track
        if track is None:
            logger.debug(LogTemplates.LIST_EMPTY_IGNORED, "start", extra=TRANSPORT_NOOP_EXTRA)
            return False

        if track.is_loaded:
            self._pending_start = None
            return self._start_track(track)

        logger.debug(LogTemplates.LIST_START_DEFERRED, track.resource_ref)
        self._pending_start = track
        future = self.load(self._player_head)
        future.add_done_callback(lambda f: self._on_head_loaded(track, f))
        return False

    def stop(self) -> bool:
        track = self.current_track
        if track is None:
            logger.debug(LogTemplates.LIST_EMPTY_IGNORED, "stop", extra=TRANSPORT_NOOP_EXTRA)
            return False
        self._pending_start = None
        active, self._active_track = self._active_track, None
        if active is not None and active is not track:
            # shuffle() moved the playing track away from the head.
            return active.stop() | track.stop()
        return track.stop()

    def next(self) -> bool:
        """Advance the head by one; no-op on the last track."""
        return self._move_head(1, "next")

    def previous(self) -> bool:
        """Move the head back by one; no-op on the first track."""
        return self._move_head(-1, "previous")

    def shuffle(self) -> None:
        """Randomly reorder tracks in place (Fisher-Yates).

        The head index is left as is, so the track now occupying it becomes
        the current track.
        """
        tracks = self._tracks
        for i in range(len(tracks) - 1, 0, -1):
            j = self._rng.randint(0, i)
            tracks[i], tracks[j] = tracks[j], tracks[i]

        logger.info(LogTemplates.LIST_SHUFFLED, len(tracks), self._player_head)
        self.events.publish(
            TrackListTopic.SHUFFLED,
            TrackListShuffled(track_count=len(tracks), player_head=self.player_head),
        )

    def close(self) -> None:
        """Detach from every track's ended topic."""
        if self._closed:
            return
        for track in self._tracks:
            track.unsubscribe(TrackTopic.ENDED, self._on_track_ended)
        self._pending_start = None
        self._active_track = None
        self._closed = True
        logger.debug(LogTemplates.LIST_CLOSED)

    # ── Internals ───────────────────────────────────────────────────

    def _move_head(self, step: int, operation: str) -> bool:
        if not self._tracks:
            logger.debug(LogTemplates.LIST_EMPTY_IGNORED, operation, extra=TRANSPORT_NOOP_EXTRA)
            return False

        target = self._player_head + step
        if not 0 <= target < len(self._tracks):
            logger.debug(
                LogTemplates.LIST_NAVIGATION_IGNORED,
                operation,
                self._player_head,
                len(self._tracks),
                extra=TRANSPORT_NOOP_EXTRA,
            )
            return False

        previous_index = self._player_head
        self.stop()
        self._player_head = target
        logger.info(LogTemplates.LIST_HEAD_MOVED, previous_index, target)
        self.events.publish(
            TrackListTopic.HEAD_MOVED,
            HeadMoved(
                previous_index=previous_index,
                index=target,
                resource_ref=self._tracks[target].resource_ref,
            ),
        )
        self.start()
        return True

    def _on_head_loaded(self, track: Track, future: asyncio.Future[Track]) -> None:
        if future.cancelled():
            return

        error = future.exception()
        if error is not None:
            logger.error(LogTemplates.LIST_START_LOAD_FAILED, track.resource_ref, error)
            if self._pending_start is track and track is self.current_track:
                self._pending_start = None
                if self._skip_unloadable:
                    logger.warning(LogTemplates.LIST_SKIPPING_UNLOADABLE, track.resource_ref)
                    self._advance_or_exhaust(track)
            return

        if self._pending_start is not track or track is not self.current_track:
            logger.debug(LogTemplates.LIST_DEFERRED_START_DROPPED, track.resource_ref)
            return

        self._pending_start = None
        self._start_track(track)

    def _start_track(self, track: Track) -> bool:
        started = track.start()
        if started:
            self._active_track = track
        return started

    def _on_track_ended(self, event: TrackEnded) -> None:
        track = event.track
        if event.reason is not TrackFinishReason.COMPLETED or (
            track is not self.current_track and track is not self._active_track
        ):
            logger.debug(
                LogTemplates.LIST_STOPPED_ENDED_IGNORED, event.resource_ref, event.reason.value
            )
            return
        self._active_track = None
        self._advance_or_exhaust(track)

    def _advance_or_exhaust(self, track: Track) -> None:
        if self._player_head + 1 < len(self._tracks):
            self.next()
            return

        logger.info(LogTemplates.LIST_EXHAUSTED, track.resource_ref)
        self.events.publish(
            TrackListTopic.EXHAUSTED,
            TrackListExhausted(
                last_index=self._player_head,
                last_resource_ref=track.resource_ref,
            ),
        )
