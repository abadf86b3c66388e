#!/usr/bin/env python3
"""Main entry point for the playlist player."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from playlist_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from playlist_player.config.container import Container
    from playlist_player.config.settings import Settings
    from playlist_player.domain.playback.events import TrackLoadFailed

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.warning(
            "Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH
        )
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playlist-player",
        description="Play a list of audio resources in sequence.",
    )
    parser.add_argument("resources", nargs="*", metavar="REF", help="URL or path of a WAV file")
    parser.add_argument("--shuffle", action="store_true", help="shuffle before playing")
    parser.add_argument("--loop", action="store_true", help="loop each track")
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    return parser


async def play(
    container: Container,
    resource_refs: Sequence[str],
    *,
    shuffle: bool = False,
    loop: bool | None = None,
) -> int:
    """Play *resource_refs* until the list is exhausted.

    Returns 0 when the last track completed, 1 when playback stalled on a
    track that could not be loaded.
    """
    from playlist_player.domain.playback.value_objects import TrackListTopic, TrackTopic

    track_list = container.build_track_list(resource_refs, loop=loop)
    skip_unloadable = container.settings.playback.skip_unloadable
    finished = asyncio.Event()
    failures: list[TrackLoadFailed] = []

    def on_load_failed(event: TrackLoadFailed) -> None:
        if skip_unloadable or event.track is not track_list.current_track:
            return
        failures.append(event)
        finished.set()

    track_list.events.subscribe(TrackListTopic.EXHAUSTED, lambda _event: finished.set())
    for track in track_list:
        track.subscribe(TrackTopic.LOAD_FAILED, on_load_failed)

    if shuffle:
        track_list.shuffle()
    track_list.start()

    await finished.wait()
    if failures:
        return 1
    logger.info(LogTemplates.PLAYER_FINISHED)
    return 0


async def _run(settings: Settings, args: argparse.Namespace) -> int:
    from playlist_player.config.container import create_container

    container = create_container(settings)
    try:
        return await play(
            container,
            args.resources,
            shuffle=args.shuffle,
            loop=True if args.loop else None,
        )
    finally:
        await container.shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    from playlist_player.config.settings import get_settings

    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    if not args.resources:
        logger.error(ErrorMessages.NO_RESOURCES)
        return 2

    logger.info(LogTemplates.PLAYER_STARTING, settings.environment)

    try:
        return asyncio.run(_run(settings, args))
    except KeyboardInterrupt:
        logger.info(LogTemplates.PLAYER_INTERRUPTED)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.PLAYER_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
