"""
Balloon Rush - Event Dispatcher

Fans round events out to any number of collaborators (renderer, audio,
scoreboard). A failing subscriber is logged and skipped; it never reaches
back into the round controller.
"""

from __future__ import annotations

import logging
import threading

from src.engine.events import EventListener, EventPayload, RoundEvent

logger = logging.getLogger(__name__)


class EventDispatcher:
    """In-process publish/subscribe hub for round events.

    Subscribers register either for every event or for a subset of
    ``RoundEvent`` types. Callbacks run synchronously on the publishing
    thread, in subscription order.
    """

    def __init__(self) -> None:
        self._subscribers: list[tuple[EventListener, frozenset[RoundEvent] | None]] = []
        self._lock = threading.Lock()

    def subscribe(
        self,
        listener: EventListener,
        events: set[RoundEvent] | frozenset[RoundEvent] | None = None,
    ) -> None:
        """Register a listener.

        Args:
            listener: Callback receiving matching EventPayloads.
            events: Event types to deliver; None means all.
        """
        with self._lock:
            if any(existing is listener for existing, _ in self._subscribers):
                logger.warning("Listener %r already subscribed", listener)
                return
            self._subscribers.append(
                (listener, frozenset(events) if events is not None else None)
            )

    def unsubscribe(self, listener: EventListener) -> None:
        """Remove a listener (no-op if it was never subscribed)."""
        with self._lock:
            self._subscribers = [
                (existing, events) for existing, events in self._subscribers
                if existing is not listener
            ]

    def publish(self, payload: EventPayload) -> None:
        """Deliver a payload to every matching subscriber."""
        with self._lock:
            subscribers = list(self._subscribers)

        for listener, events in subscribers:
            if events is not None and payload.event not in events:
                continue
            try:
                listener(payload)
            except Exception:
                logger.exception(
                    "Subscriber %r failed handling %s", listener, payload.event.name
                )

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def clear(self) -> None:
        """Drop all subscribers."""
        with self._lock:
            self._subscribers.clear()
