"""
Balloon Rush - Round Session

High-level driver that ties one round controller to an event dispatcher
and session statistics. Provides serialized command entry points for the
input layer and an optional background tick loop for headless or
server-side play.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Any, Callable

from src.config.settings import Settings, get_settings
from src.engine.base import CommandResult, RoundConfig, RoundSnapshot, RoundState
from src.engine.events import EventListener, EventPayload, RoundEvent
from src.engine.risk import RandomSource
from src.engine.round import RoundController
from src.engine.stats import StatsTracker
from src.realtime.dispatcher import EventDispatcher
from src.realtime.models import RoundSnapshotModel

logger = logging.getLogger(__name__)


class RoundSession:
    """Owns one round controller and everything that observes it.

    Every call into the controller goes through a single lock, so the
    background tick loop and command callers on other threads never write
    round state concurrently.
    """

    def __init__(
        self,
        config: RoundConfig | None = None,
        *,
        rng: RandomSource | None = None,
        seed: int | None = None,
        clock: Callable[[], float] | None = None,
        tick_interval_ms: float | None = None,
    ) -> None:
        if config is None or tick_interval_ms is None:
            settings: Settings = get_settings()
            config = config or settings.to_round_config()
            tick_interval_ms = tick_interval_ms or settings.tick_interval_ms

        if rng is None:
            rng = random.Random(seed)

        self.dispatcher = EventDispatcher()
        self.stats = StatsTracker()
        self.tick_interval_ms = tick_interval_ms
        self._controller = RoundController(
            config, rng=rng, clock=clock, on_event=self._handle_event
        )
        self._lock = threading.RLock()
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None

    # -- Commands --------------------------------------------------------

    def start(self) -> CommandResult:
        with self._lock:
            return self._controller.start()

    def land(self, participant_id: int) -> CommandResult:
        with self._lock:
            return self._controller.land(participant_id)

    def reset(self) -> CommandResult:
        with self._lock:
            return self._controller.reset()

    def tick(self, dt_ms: float | None = None) -> RoundSnapshot:
        with self._lock:
            return self._controller.tick(dt_ms)

    # -- Observation -----------------------------------------------------

    def subscribe(
        self,
        listener: EventListener,
        events: set[RoundEvent] | None = None,
    ) -> None:
        """Register a collaborator for round events."""
        self.dispatcher.subscribe(listener, events)

    def unsubscribe(self, listener: EventListener) -> None:
        self.dispatcher.unsubscribe(listener)

    @property
    def state(self) -> RoundState:
        return self._controller.state

    def snapshot(self) -> RoundSnapshot:
        with self._lock:
            return self._controller.snapshot()

    def get_snapshot(self) -> dict[str, Any]:
        """Current round as a plain dict, for collaborators and logs."""
        return RoundSnapshotModel.from_snapshot(self.snapshot()).model_dump(mode="json")

    def _handle_event(self, payload: EventPayload) -> None:
        if payload.event == RoundEvent.ROUND_RESOLVED:
            self.stats.record_round(self._controller.snapshot())
        self.dispatcher.publish(payload)

    # -- Background driver -----------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run(self, *, auto_restart: bool = False) -> None:
        """Start ticking the round on a daemon thread.

        Args:
            auto_restart: Reset and start a fresh round as soon as one
                resolves, instead of idling until the caller resets.
        """
        if self.is_running:
            logger.warning("Session driver already running")
            return

        stop_event = threading.Event()
        self._stop_event = stop_event
        self._thread = threading.Thread(
            target=self._tick_loop,
            args=(stop_event, auto_restart),
            daemon=True,
            name="round-driver",
        )
        self._thread.start()
        logger.info("Session driver started (%.1f ms/tick)", self.tick_interval_ms)

    def _tick_loop(self, stop_event: threading.Event, auto_restart: bool) -> None:
        interval_s = self.tick_interval_ms / 1000

        while not stop_event.is_set():
            try:
                with self._lock:
                    snapshot = self._controller.tick()
                    if auto_restart and snapshot.state == RoundState.RESOLVED:
                        self._controller.reset()
                        self._controller.start()
            except Exception:
                logger.exception("Tick failed")

            stop_event.wait(interval_s)

    def shutdown(self) -> None:
        """Stop the background driver and drop subscribers."""
        if self._stop_event:
            self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5)
        self._stop_event = None
        self._thread = None
        self.dispatcher.clear()
