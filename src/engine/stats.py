"""
Balloon Rush - Session Statistics

Per-participant statistics accumulated across resolved rounds.
"""

from dataclasses import dataclass, field

from src.engine.base import RoundSnapshot


@dataclass
class GameStats:
    """
    Running totals for one participant.

    Attributes:
        games_played: Resolved rounds the participant took part in
        high_score: Best final score
        total_score: Sum of final scores
        total_time_played_ms: Flight time summed over all rounds
        successful_landings: Rounds where the participant cashed out
        crashes: Rounds lost to a crash before landing
    """
    games_played: int = 0
    high_score: int = 0
    total_score: int = 0
    total_time_played_ms: float = 0.0
    successful_landings: int = 0
    crashes: int = 0

    @property
    def average_score(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.total_score / self.games_played


@dataclass
class StatsTracker:
    """Accumulates ``GameStats`` per participant id from resolved rounds."""

    stats: dict[int, GameStats] = field(default_factory=dict)

    def record_round(self, snapshot: RoundSnapshot) -> None:
        """Fold a resolved round into the totals.

        Raises:
            ValueError: If the round has not resolved yet
        """
        if not snapshot.is_resolved:
            raise ValueError(
                f"Only resolved rounds can be recorded, got {snapshot.state.value}."
            )

        for participant in snapshot.participants:
            entry = self.stats.setdefault(participant.participant_id, GameStats())
            score = participant.payout

            entry.games_played += 1
            entry.total_score += score
            entry.high_score = max(entry.high_score, score)
            if participant.crashed_at_ms is not None:
                entry.total_time_played_ms += participant.crashed_at_ms
            else:
                entry.total_time_played_ms += snapshot.elapsed_ms
            if participant.has_landed:
                entry.successful_landings += 1
            else:
                entry.crashes += 1

    def for_participant(self, participant_id: int) -> GameStats:
        """Stats for one participant (empty if never recorded)."""
        return self.stats.get(participant_id, GameStats())

    def reset(self) -> None:
        self.stats.clear()
