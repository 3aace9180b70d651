"""
Balloon Rush - Round Controller

Owns the round lifecycle (waiting -> playing -> resolved), the shared
multiplier clock, and the per-participant land/crash bookkeeping.

All participants share one multiplier per tick but roll their own crash
draw, so two balloons in the same round can pop on different ticks.
Participants are kept in a single id-indexed mapping and every operation
applies the same logic to each entry.
"""

from __future__ import annotations

import logging
import math
import random
import time
import uuid
from dataclasses import replace
from typing import Callable

from src.engine.base import (
    CommandResult,
    ParticipantState,
    RoundConfig,
    RoundSnapshot,
    RoundState,
)
from src.engine.events import EventListener, EventPayload, RoundEvent
from src.engine.risk import RandomSource, RiskEngine
from src.engine.validators import validate_tick_delta

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


def _score_at(elapsed_ms: float, points_per_second: float) -> int:
    """Whole points earned after ``elapsed_ms``.

    The product is snapped to 1e-9 before flooring so a tick cadence that
    is not exact in binary (1000/60 ms) still scores a full point on each
    whole second.
    """
    return math.floor(round(elapsed_ms / 1000 * points_per_second, 9))


class RoundController:
    """
    State machine driving a single round.

    The controller is the only writer of round and participant state.
    Commands that are not valid in the current state are rejected with a
    ``CommandResult`` and leave state untouched.

    Args:
        config: Round constants (defaults to ``RoundConfig()``)
        rng: Random source for crash draws; seed it to replay a round
        clock: Millisecond clock used for ``started_at`` and clock-driven ticks
        on_event: Callback receiving every emitted ``EventPayload``
        engine: Risk engine override (defaults to one built from ``config``)
    """

    def __init__(
        self,
        config: RoundConfig | None = None,
        *,
        rng: RandomSource | None = None,
        clock: Callable[[], float] | None = None,
        on_event: EventListener | None = None,
        engine: RiskEngine | None = None,
    ) -> None:
        self.config = config or RoundConfig()
        self.engine = engine or RiskEngine(self.config)
        self.rng = rng or random.Random()
        self._clock = clock or _monotonic_ms
        self._on_event = on_event
        self._init_round()

    def _init_round(self) -> None:
        self._state = RoundState.WAITING
        self._round_id: str | None = None
        self._started_at: float | None = None
        self._elapsed_ms = 0.0
        self._elapsed_carry = 0.0
        self._multiplier = 1.0
        self._tick_count = 0
        self._participants: dict[int, ParticipantState] = {
            pid: ParticipantState(participant_id=pid)
            for pid in self.config.participant_ids
        }

    # -- Read access -----------------------------------------------------

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def round_id(self) -> str | None:
        return self._round_id

    @property
    def multiplier(self) -> float:
        return self._multiplier

    @property
    def elapsed_ms(self) -> float:
        return self._elapsed_ms

    @property
    def participants(self) -> dict[int, ParticipantState]:
        """Copy of the participant mapping, keyed by id."""
        return dict(self._participants)

    def participant(self, participant_id: int) -> ParticipantState:
        """Current state of one participant.

        Raises:
            KeyError: If the id is not part of this round
        """
        return self._participants[participant_id]

    def snapshot(self) -> RoundSnapshot:
        """Public view of the round."""
        return RoundSnapshot(
            round_id=self._round_id,
            state=self._state,
            started_at=self._started_at,
            elapsed_ms=self._elapsed_ms,
            multiplier=self._multiplier,
            crash_risk=self.engine.crash_risk_per_tick(self._multiplier),
            risk_level=self.engine.risk_level(self._multiplier),
            tick_count=self._tick_count,
            participants=tuple(
                self._participants[pid] for pid in sorted(self._participants)
            ),
        )

    # -- Commands --------------------------------------------------------

    def start(self) -> CommandResult:
        """Begin a round. Only accepted while waiting."""
        if self._state != RoundState.WAITING:
            logger.debug("start rejected in state %s", self._state.value)
            return CommandResult.INVALID_TRANSITION

        self._init_round()
        self._state = RoundState.PLAYING
        self._round_id = str(uuid.uuid4())
        self._started_at = self._clock()

        logger.info(
            "Round %s started with %d participant(s)",
            self._round_id, len(self._participants),
        )
        self._emit_state_changed()
        return CommandResult.OK

    def land(self, participant_id: int) -> CommandResult:
        """Cash out one participant at the current multiplier.

        The landed balloon stays in the air: it keeps drawing for crashes,
        but its final score is locked from here on.
        """
        participant = self._participants.get(participant_id)
        if participant is None:
            logger.debug("land rejected for unknown participant %r", participant_id)
            return CommandResult.UNKNOWN_PARTICIPANT

        if self._state != RoundState.PLAYING or not participant.is_active:
            logger.debug(
                "land rejected for participant %d (state=%s, landed=%s, crashed=%s)",
                participant_id, self._state.value,
                participant.has_landed, participant.has_crashed,
            )
            return CommandResult.INVALID_TRANSITION

        final_score = math.floor(participant.base_score * self._multiplier)
        self._participants[participant_id] = replace(
            participant,
            has_landed=True,
            final_score=final_score,
            landed_multiplier=self._multiplier,
        )

        logger.info(
            "Participant %d landed at %.2fx for %d points",
            participant_id, self._multiplier, final_score,
        )
        self._emit(
            RoundEvent.PARTICIPANT_LANDED,
            participant_id=participant_id,
            final_score=final_score,
            multiplier=self._multiplier,
        )
        return CommandResult.OK

    def reset(self) -> CommandResult:
        """Clear the round for a new start.

        Accepted when resolved, and as a harmless clear while waiting.
        """
        if self._state == RoundState.PLAYING:
            logger.debug("reset rejected while playing")
            return CommandResult.INVALID_TRANSITION

        previous = self._state
        previous_round = self._round_id
        self._init_round()

        self._emit(RoundEvent.ROUND_RESET, round_id=previous_round)
        if previous != RoundState.WAITING:
            self._emit_state_changed()
        return CommandResult.OK

    # -- Tick ------------------------------------------------------------

    def tick(self, dt_ms: float | None = None) -> RoundSnapshot:
        """Advance the round by one tick.

        Args:
            dt_ms: Duration of this tick. When omitted, elapsed time is
                recomputed from the clock instead of accumulated.

        Returns:
            Snapshot after the tick (unchanged when not playing)

        Raises:
            ValueError: If ``dt_ms`` is negative
        """
        if dt_ms is not None:
            dt_ms = validate_tick_delta(dt_ms)

        if self._state != RoundState.PLAYING:
            return self.snapshot()

        previous_elapsed = self._elapsed_ms
        if dt_ms is None:
            self._elapsed_ms = max(previous_elapsed, self._clock() - self._started_at)
            self._elapsed_carry = 0.0
        else:
            self._accumulate(dt_ms)
        step_ms = self._elapsed_ms - previous_elapsed

        self._tick_count += 1
        self._multiplier = self.engine.multiplier_at(self._elapsed_ms)

        flying = [
            pid for pid in sorted(self._participants)
            if not self._participants[pid].has_crashed
        ]

        base_score = _score_at(self._elapsed_ms, self.config.points_per_second)
        risk_level = self.engine.risk_level(self._multiplier)
        for pid in flying:
            self._participants[pid] = replace(self._participants[pid], base_score=base_score)
            self._emit(
                RoundEvent.SCORE_UPDATED,
                participant_id=pid,
                base_score=base_score,
                multiplier=self._multiplier,
                risk_level=risk_level,
            )

        # Shared multiplier, one independent draw per balloon.
        for pid in flying:
            if self.engine.should_crash(self._multiplier, self.rng, dt_ms=step_ms):
                self._crash(pid)

        if all(p.has_crashed for p in self._participants.values()):
            self._resolve()

        return self.snapshot()

    def _accumulate(self, dt_ms: float) -> None:
        # Compensated (Neumaier) sum; the carry holds the low-order bits
        # plain float addition would drop on every tick.
        total = self._elapsed_ms + dt_ms
        if abs(self._elapsed_ms) >= abs(dt_ms):
            self._elapsed_carry += (self._elapsed_ms - total) + dt_ms
        else:
            self._elapsed_carry += (dt_ms - total) + self._elapsed_ms
        self._elapsed_ms = total + self._elapsed_carry
        self._elapsed_carry -= self._elapsed_ms - total

    def _crash(self, participant_id: int) -> None:
        participant = self._participants[participant_id]
        final_score = participant.final_score if participant.has_landed else 0
        self._participants[participant_id] = replace(
            participant,
            has_crashed=True,
            final_score=final_score,
            crashed_at_ms=self._elapsed_ms,
        )

        logger.info(
            "Participant %d crashed at %.2fx after %.0f ms (landed=%s)",
            participant_id, self._multiplier, self._elapsed_ms, participant.has_landed,
        )
        self._emit(
            RoundEvent.PARTICIPANT_CRASHED,
            participant_id=participant_id,
            final_score=final_score,
            multiplier=self._multiplier,
            elapsed_ms=self._elapsed_ms,
        )

    def _resolve(self) -> None:
        self._state = RoundState.RESOLVED
        final_scores = {
            pid: p.payout for pid, p in sorted(self._participants.items())
        }

        logger.info(
            "Round %s resolved at %.2fx after %d ticks: %s",
            self._round_id, self._multiplier, self._tick_count, final_scores,
        )
        self._emit_state_changed()
        self._emit(
            RoundEvent.ROUND_RESOLVED,
            final_scores=final_scores,
            multiplier=self._multiplier,
            elapsed_ms=self._elapsed_ms,
        )

    # -- Event emission --------------------------------------------------

    def _emit_state_changed(self) -> None:
        self._emit(RoundEvent.STATE_CHANGED, state=self._state.value)

    def _emit(
        self,
        event: RoundEvent,
        *,
        participant_id: int | None = None,
        round_id: str | None = None,
        **data,
    ) -> None:
        if self._on_event is None:
            return

        payload = EventPayload(
            event=event,
            round_id=round_id or self._round_id,
            participant_id=participant_id,
            data=data,
        )
        try:
            self._on_event(payload)
        except Exception:
            logger.exception("Event listener failed for %s", event.name)
