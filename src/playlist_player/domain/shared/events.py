"""Synchronous event bus embedded by every stateful playback component."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from playlist_player.domain.shared.messages import LogTemplates
from playlist_player.domain.shared.types import NonEmptyStr, UtcDatetimeField, utcnow

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]


class PlaybackEvent(BaseModel):
    """Base class for all payloads published on an EventBus."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)


class CancelToken:
    """One-shot cancellation handle that drops every subscription bound to it."""

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def add_callback(self, callback: Callable[[], None]) -> None:
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()


@dataclass(eq=False)
class _Registration:
    handler: EventHandler
    once: bool = False
    cancel_token: CancelToken | None = None
    active: bool = field(default=True)


class EventBus:
    """In-memory pub/sub bus keyed by topic.

    Handlers run synchronously in registration order on the publishing
    call stack. Exceptions in handlers are logged but do not prevent other
    handlers from running. Registering the same handler twice yields two
    registrations.
    """

    def __init__(self) -> None:
        self._registrations: dict[str, list[_Registration]] = defaultdict(list)

    def subscribe(
        self,
        topic: str,
        handler: EventHandler,
        *,
        once: bool = False,
        cancel_token: CancelToken | None = None,
    ) -> None:
        if cancel_token is not None and cancel_token.cancelled:
            return

        registration = _Registration(handler=handler, once=once, cancel_token=cancel_token)
        self._registrations[topic].append(registration)
        if cancel_token is not None:
            cancel_token.add_callback(lambda: self._on_token_cancelled(cancel_token))
        logger.debug(LogTemplates.BUS_SUBSCRIBED, topic)

    def unsubscribe(self, topic: str, handler: EventHandler) -> bool:
        registrations = self._registrations.get(topic, [])
        for registration in registrations:
            if registration.handler == handler:
                self._remove(topic, registration)
                logger.debug(LogTemplates.BUS_UNSUBSCRIBED, topic)
                return True
        return False

    def publish(self, topic: str, payload: Any = None) -> int:
        """Deliver *payload* to the current subscribers of *topic*.

        Returns the number of handlers invoked.
        """
        registrations = list(self._registrations.get(topic, []))

        if not registrations:
            logger.debug(LogTemplates.BUS_NO_HANDLERS, topic)
            return 0

        logger.debug(LogTemplates.BUS_PUBLISHING, topic, len(registrations))

        invoked = 0
        for registration in registrations:
            # A handler earlier in this dispatch may have removed it.
            if not registration.active:
                continue
            if registration.once:
                self._remove(topic, registration)
            invoked += 1
            try:
                registration.handler(payload)
            except Exception as e:
                logger.exception(LogTemplates.BUS_HANDLER_ERROR, topic, e)
        return invoked

    def subscriber_count(self, topic: str) -> int:
        return len(self._registrations.get(topic, []))

    def clear(self) -> None:
        """Remove all handlers."""
        for registrations in self._registrations.values():
            for registration in registrations:
                registration.active = False
        self._registrations.clear()
        logger.debug(LogTemplates.BUS_CLEARED)

    def _remove(self, topic: str, registration: _Registration) -> None:
        registration.active = False
        registrations = self._registrations.get(topic)
        if registrations is None:
            return
        try:
            registrations.remove(registration)
        except ValueError:
            return
        if not registrations:
            del self._registrations[topic]

    def _on_token_cancelled(self, token: CancelToken) -> None:
        removed = 0
        for topic, registrations in list(self._registrations.items()):
            for registration in list(registrations):
                if registration.cancel_token is token:
                    self._remove(topic, registration)
                    removed += 1
        if removed:
            logger.debug(LogTemplates.BUS_TOKEN_CANCELLED, removed)
