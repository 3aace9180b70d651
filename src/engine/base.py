"""
Balloon Rush - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the round engine. Configuration and participant state are immutable (frozen
dataclasses); the round controller replaces them rather than mutating them.
"""

from dataclasses import dataclass, field
from enum import Enum

from src.engine.validators import (
    validate_participant_count,
    validate_positive,
    validate_probability,
)


class RoundState(Enum):
    """Lifecycle states of a round."""
    WAITING = "waiting"
    PLAYING = "playing"
    RESOLVED = "resolved"


class GrowthLaw(Enum):
    """Available multiplier growth functions."""
    EXPONENTIAL = "exponential"  # growth_base ** seconds
    STEPPED = "stepped"          # accelerating +increment steps


class RiskLaw(Enum):
    """Available crash-risk functions."""
    EXPONENTIAL = "exponential"  # base * factor ** (m - 1)
    ZONED = "zoned"              # doubles every power-of-two multiplier


class CommandResult(Enum):
    """Outcome of a command issued to the round controller.

    Rejections are expected traffic, not failures, so they are
    reported through this value instead of raised.
    """
    OK = "ok"
    INVALID_TRANSITION = "invalid_transition"
    UNKNOWN_PARTICIPANT = "unknown_participant"

    @property
    def accepted(self) -> bool:
        """Returns True if the command changed round state."""
        return self is CommandResult.OK

    def __bool__(self) -> bool:
        return self.accepted


@dataclass(frozen=True)
class RoundConfig:
    """
    Tunable constants for a round.

    Attributes:
        growth_law: Multiplier growth function
        growth_base: Multiplier reached after one second (exponential law)
        step_increment: Multiplier added per step (stepped law)
        step_interval_ms: Base duration of one step (stepped law)
        step_acceleration_ms: Time for the step rate to double (stepped law)
        risk_law: Crash-risk function
        base_risk: Per-tick crash probability at multiplier 1.0
        risk_growth_factor: Risk growth per unit of multiplier (exponential law)
        risk_cap: Upper bound on the per-tick crash probability
        points_per_second: Base score accrued per second of flight
        participant_count: Number of balloons racing in the round (1-2)
        reference_tick_ms: Tick length the risk curve is expressed for; when
            set, risk is rescaled to the actual tick length
    """
    growth_law: GrowthLaw = GrowthLaw.EXPONENTIAL
    growth_base: float = 1.01
    step_increment: float = 0.01
    step_interval_ms: float = 500.0
    step_acceleration_ms: float = 1000.0
    risk_law: RiskLaw = RiskLaw.EXPONENTIAL
    base_risk: float = 0.001
    risk_growth_factor: float = 2.0
    risk_cap: float = 0.02
    points_per_second: float = 10.0
    participant_count: int = 1
    reference_tick_ms: float | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.growth_base < 1.0:
            raise ValueError(
                f"Growth base must be at least 1.0, got {self.growth_base}."
            )
        if self.risk_growth_factor < 1.0:
            raise ValueError(
                f"Risk growth factor must be at least 1.0, got {self.risk_growth_factor}."
            )
        validate_positive(self.step_increment, "Step increment")
        validate_positive(self.step_interval_ms, "Step interval")
        validate_positive(self.step_acceleration_ms, "Step acceleration")
        validate_probability(self.base_risk, "Base risk")
        validate_probability(self.risk_cap, "Risk cap")
        if self.risk_cap >= 1.0:
            # A single tick must never crash with certainty.
            raise ValueError(f"Risk cap must be below 1.0, got {self.risk_cap}.")
        if self.base_risk > self.risk_cap:
            raise ValueError(
                f"Base risk {self.base_risk} exceeds risk cap {self.risk_cap}."
            )
        validate_positive(self.points_per_second, "Points per second", allow_zero=True)
        validate_participant_count(self.participant_count)
        if self.reference_tick_ms is not None:
            validate_positive(self.reference_tick_ms, "Reference tick")

    @property
    def participant_ids(self) -> tuple[int, ...]:
        """Ids of the participants in a round, starting at 1."""
        return tuple(range(1, self.participant_count + 1))


@dataclass(frozen=True)
class ParticipantState:
    """
    State of one balloon within a round.

    Attributes:
        participant_id: 1-based id of the participant
        has_landed: Whether the participant cashed out
        has_crashed: Whether the participant's balloon popped
        base_score: Time-based score, independent of multiplier
        final_score: Locked score (set on land, or 0 on an unlanded crash)
        landed_multiplier: Multiplier at the moment of landing
        crashed_at_ms: Elapsed round time of the crash
    """
    participant_id: int
    has_landed: bool = False
    has_crashed: bool = False
    base_score: int = 0
    final_score: int | None = None
    landed_multiplier: float | None = None
    crashed_at_ms: float | None = None

    @property
    def is_active(self) -> bool:
        """True while the participant can still land."""
        return not (self.has_landed or self.has_crashed)

    @property
    def payout(self) -> int:
        """Score the participant walks away with (0 until landed)."""
        return self.final_score or 0


@dataclass(frozen=True)
class RoundSnapshot:
    """
    Public view of a round, emitted to collaborators after every change.

    Attributes:
        round_id: Identifier of the round (None before the first start)
        state: Current lifecycle state
        started_at: Clock time (ms) the round started, None while waiting
        elapsed_ms: Round time elapsed since start
        multiplier: Current shared multiplier
        crash_risk: Per-tick crash probability at the current multiplier
        risk_level: 0-1 danger indicator for presentation layers
        tick_count: Number of ticks processed this round
        participants: Participant states ordered by id
    """
    round_id: str | None
    state: RoundState
    started_at: float | None
    elapsed_ms: float
    multiplier: float
    crash_risk: float
    risk_level: float
    tick_count: int
    participants: tuple[ParticipantState, ...] = field(default_factory=tuple)

    @property
    def is_resolved(self) -> bool:
        return self.state == RoundState.RESOLVED

    def participant(self, participant_id: int) -> ParticipantState:
        """Look up a participant by id."""
        for p in self.participants:
            if p.participant_id == participant_id:
                return p
        raise KeyError(f"Unknown participant {participant_id}.")
