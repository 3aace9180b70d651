"""
Balloon Rush - Snapshot Models

Pydantic models mirroring the engine's round snapshot, for collaborators
that want plain dicts (``model_dump()``) instead of engine dataclasses.
"""

from pydantic import BaseModel, Field

from src.engine.base import ParticipantState, RoundSnapshot, RoundState


class ParticipantModel(BaseModel):
    """Mirrors ``ParticipantState``."""

    participant_id: int = Field(ge=1)
    has_landed: bool = False
    has_crashed: bool = False
    base_score: int = Field(default=0, ge=0)
    final_score: int | None = None
    landed_multiplier: float | None = None
    crashed_at_ms: float | None = None

    model_config = {"from_attributes": True}

    def to_state(self) -> ParticipantState:
        return ParticipantState(**self.model_dump())


class RoundSnapshotModel(BaseModel):
    """Mirrors ``RoundSnapshot``."""

    round_id: str | None = None
    state: RoundState = RoundState.WAITING
    started_at: float | None = None
    elapsed_ms: float = Field(default=0.0, ge=0)
    multiplier: float = Field(default=1.0, ge=1.0)
    crash_risk: float = Field(default=0.0, ge=0, le=1)
    risk_level: float = Field(default=0.0, ge=0, le=1)
    tick_count: int = Field(default=0, ge=0)
    participants: list[ParticipantModel] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @classmethod
    def from_snapshot(cls, snapshot: RoundSnapshot) -> "RoundSnapshotModel":
        """Build from an engine snapshot."""
        return cls.model_validate(snapshot)

    def to_snapshot(self) -> RoundSnapshot:
        """Rebuild the engine snapshot."""
        return RoundSnapshot(
            round_id=self.round_id,
            state=self.state,
            started_at=self.started_at,
            elapsed_ms=self.elapsed_ms,
            multiplier=self.multiplier,
            crash_risk=self.crash_risk,
            risk_level=self.risk_level,
            tick_count=self.tick_count,
            participants=tuple(p.to_state() for p in self.participants),
        )
