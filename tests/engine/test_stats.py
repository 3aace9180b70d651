"""
Balloon Rush - Session Statistics Tests
"""

import pytest
from src.engine.base import ParticipantState, RoundSnapshot, RoundState
from src.engine.stats import GameStats, StatsTracker


def resolved_round(*participants, elapsed_ms=4000.0):
    return RoundSnapshot(
        round_id="round-1",
        state=RoundState.RESOLVED,
        started_at=0.0,
        elapsed_ms=elapsed_ms,
        multiplier=1.04,
        crash_risk=0.001,
        risk_level=0.1,
        tick_count=40,
        participants=tuple(participants),
    )


class TestGameStats:
    """Tests for GameStats."""

    def test_empty_average(self):
        assert GameStats().average_score == 0.0

    def test_average(self):
        stats = GameStats(games_played=4, total_score=300)
        assert stats.average_score == 75.0


class TestStatsTracker:
    """Tests for StatsTracker.record_round()."""

    def test_records_landing(self):
        tracker = StatsTracker()
        tracker.record_round(resolved_round(
            ParticipantState(1, has_landed=True, has_crashed=True, base_score=40,
                             final_score=41, crashed_at_ms=4000.0),
        ))

        stats = tracker.for_participant(1)
        assert stats.games_played == 1
        assert stats.successful_landings == 1
        assert stats.crashes == 0
        assert stats.high_score == 41
        assert stats.total_time_played_ms == 4000.0

    def test_records_crash(self):
        tracker = StatsTracker()
        tracker.record_round(resolved_round(
            ParticipantState(1, has_crashed=True, base_score=20, final_score=0,
                             crashed_at_ms=2000.0),
        ))

        stats = tracker.for_participant(1)
        assert stats.crashes == 1
        assert stats.successful_landings == 0
        assert stats.high_score == 0

    def test_accumulates_across_rounds(self):
        tracker = StatsTracker()
        for score in (50, 150, 0):
            landed = score > 0
            tracker.record_round(resolved_round(
                ParticipantState(1, has_landed=landed, has_crashed=True,
                                 final_score=score, crashed_at_ms=1000.0),
            ))

        stats = tracker.for_participant(1)
        assert stats.games_played == 3
        assert stats.high_score == 150
        assert stats.average_score == pytest.approx(200 / 3)
        assert stats.total_time_played_ms == 3000.0

    def test_tracks_participants_separately(self):
        tracker = StatsTracker()
        tracker.record_round(resolved_round(
            ParticipantState(1, has_crashed=True, final_score=0, crashed_at_ms=500.0),
            ParticipantState(2, has_landed=True, has_crashed=True, final_score=80,
                             crashed_at_ms=4000.0),
        ))

        assert tracker.for_participant(1).crashes == 1
        assert tracker.for_participant(2).successful_landings == 1
        assert tracker.for_participant(1).total_time_played_ms == 500.0

    def test_unresolved_round_rejected(self):
        snapshot = RoundSnapshot(
            round_id="r", state=RoundState.PLAYING, started_at=0.0, elapsed_ms=10.0,
            multiplier=1.0, crash_risk=0.001, risk_level=0.1, tick_count=1,
        )
        with pytest.raises(ValueError, match="Only resolved rounds"):
            StatsTracker().record_round(snapshot)

    def test_unknown_participant_is_empty(self):
        assert StatsTracker().for_participant(7) == GameStats()

    def test_reset(self):
        tracker = StatsTracker()
        tracker.record_round(resolved_round(
            ParticipantState(1, has_crashed=True, final_score=0, crashed_at_ms=10.0),
        ))
        tracker.reset()
        assert tracker.stats == {}
