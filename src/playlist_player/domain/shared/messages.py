"""Centralized message constants for error messages and log templates."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Validation Errors
    EMPTY_RESOURCE_REF = "Track resource reference cannot be empty"
    INVALID_FADE_TIME_CONSTANT = "Fade time constant must be positive"
    INVALID_VOLUME = "Volume must be between 0 and 1, got {volume}"

    # Track List Errors
    INDEX_OUT_OF_RANGE = "Track index {index} is out of range for a list of {size} tracks"

    # Loading Errors
    LOAD_FAILED = "Failed to load '{resource_ref}': {reason}"
    FETCH_HTTP_STATUS = "HTTP {status} while fetching"
    FETCH_TOO_LARGE = "Resource exceeds {max_bytes} bytes"
    FETCH_FILE_MISSING = "File not found: {path}"
    DECODE_INVALID_WAV = "Not a valid WAV stream: {detail}"
    DECODE_EMPTY = "Resource is empty"
    LOADER_UNEXPECTED = "Unexpected loader error: {error!r}"

    # Engine Errors
    VOICE_ALREADY_FIRED = "A voice can only be started once"
    VOICE_NOT_BOUND = "Voice has no buffer bound"
    ENGINE_CLOSED = "Audio engine is closed"

    # Settings Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # CLI Errors
    NO_RESOURCES = "At least one resource reference is required"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Event Bus
    BUS_SUBSCRIBED = "Subscribed handler to: %s"
    BUS_UNSUBSCRIBED = "Unsubscribed handler from %s"
    BUS_NO_HANDLERS = "No handlers for %s"
    BUS_PUBLISHING = "Publishing %s to %d handlers"
    BUS_HANDLER_ERROR = "Error in handler for %s: %s"
    BUS_TOKEN_CANCELLED = "Cancel token removed %d registrations"
    BUS_CLEARED = "Cleared all event handlers"

    # Track Loading
    TRACK_LOAD_REQUESTED = "Loading track '%s'"
    TRACK_PRELOAD_SKIPPED = "No running event loop, preload of '%s' left to the first load()"
    TRACK_LOAD_IN_FLIGHT = "Load already in flight for '%s'"
    TRACK_ALREADY_LOADED = "Track '%s' already loaded"
    TRACK_LOADED = "Loaded track '%s' (%.2fs)"
    TRACK_LOAD_FAILED = "Failed to load track '%s': %s"

    # Track Transport
    TRACK_STARTED = "Started track '%s' at engine time %.3f"
    TRACK_STOPPED = "Stopped track '%s'"
    TRACK_ENDED = "Track '%s' ended (%s)"
    TRACK_STALE_ENDED = "Dropping duplicate ended signal for '%s' cycle %d"
    TRACK_VOICE_REARMED = "Acquired fresh voice for '%s'"
    TRACK_START_IGNORED = "Ignoring start on '%s': load_state=%s play_state=%s"
    TRACK_STOP_IGNORED = "Ignoring stop on '%s': load_state=%s play_state=%s engine=%s"

    # Track List
    LIST_CREATED = "Track list created with %d tracks"
    LIST_EMPTY_IGNORED = "Ignoring %s on empty track list"
    LIST_START_DEFERRED = "Deferring start of '%s' until loaded"
    LIST_DEFERRED_START_DROPPED = "Dropping deferred start of '%s': no longer current"
    LIST_START_LOAD_FAILED = "Could not start '%s': %s"
    LIST_SKIPPING_UNLOADABLE = "Skipping unloadable track '%s'"
    LIST_HEAD_MOVED = "Player head moved %d -> %d"
    LIST_NAVIGATION_IGNORED = "Ignoring %s at index %d of %d"
    LIST_SHUFFLED = "Shuffled %d tracks, head stays at %d"
    LIST_EXHAUSTED = "Track list exhausted after '%s'"
    LIST_STOPPED_ENDED_IGNORED = "Ended signal from '%s' (%s) does not advance the list"
    LIST_CLOSED = "Track list closed"

    # Engine
    ENGINE_CREATED = "Headless audio engine created"
    ENGINE_STATE_CHANGED = "Audio engine state %s -> %s"
    VOICE_SCHEDULED = "Voice scheduled to end in %.3fs"

    # Loader
    LOADER_FETCHING = "Fetching %s"
    LOADER_READING_FILE = "Reading %s"
    LOADER_CLOSED = "Resource loader closed"

    # Container / CLI
    CONTAINER_SHUTDOWN = "Container shut down"
    PLAYER_STARTING = "Starting playlist player (environment=%s)"
    PLAYER_FINISHED = "Playlist finished"
    PLAYER_INTERRUPTED = "Received keyboard interrupt, shutting down"
    PLAYER_FATAL_ERROR = "Fatal error: %s"


TRANSPORT_NOOP_EXTRA: dict[str, bool] = {"transport_noop": True}
"""Pass as ``extra=`` when logging a transport command that had no effect."""
