from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from .events import Event

logger = logging.getLogger(__name__)

Subscriber = Callable[[Event], None]


@dataclass(frozen=True)
class _Registration:
    token: int
    callback: Subscriber
    event_type: Optional[type]


class NotificationBus:
    """In-process publish/subscribe channel for state-change events.

    Delivery is synchronous, in registration order, at most once and in
    memory only: a subscriber registered after ``publish`` returns never sees
    that event. Fan-out walks a snapshot of the subscriber list, so callbacks
    may publish, subscribe or unsubscribe without disturbing the delivery in
    progress. A subscriber that raises is logged and skipped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tokens = itertools.count(1)
        self._registrations: list[_Registration] = []

    def subscribe(self, callback: Subscriber, *, event_type: Optional[type] = None) -> Callable[[], None]:
        """Register ``callback``; returns a function removing exactly this registration."""
        if not callable(callback):
            raise TypeError("callback must be callable")

        with self._lock:
            registration = _Registration(token=next(self._tokens), callback=callback, event_type=event_type)
            self._registrations.append(registration)

        def unsubscribe() -> None:
            with self._lock:
                self._registrations = [r for r in self._registrations if r.token != registration.token]

        return unsubscribe

    def publish(self, event: Event) -> int:
        """Deliver ``event`` to current subscribers. Returns how many were called."""
        with self._lock:
            snapshot = tuple(self._registrations)

        logger.debug("Publishing %s to %d subscriber(s)", type(event).__name__, len(snapshot))

        delivered = 0
        for registration in snapshot:
            if registration.event_type is not None and not isinstance(event, registration.event_type):
                continue
            try:
                registration.callback(event)
            except Exception:
                logger.exception(
                    "Notification subscriber %r failed on %s", registration.callback, type(event).__name__
                )
                continue
            delivered += 1
        return delivered

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._registrations)
