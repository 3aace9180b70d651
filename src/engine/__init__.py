"""
Balloon Rush Round Engine.

Pure Python round logic with zero UI/transport dependencies.
Handles multiplier growth, crash risk, landing, and round resolution.
"""

from src.engine.base import (
    CommandResult,
    GrowthLaw,
    ParticipantState,
    RiskLaw,
    RoundConfig,
    RoundSnapshot,
    RoundState,
)
from src.engine.events import EventPayload, RoundEvent
from src.engine.risk import RiskEngine
from src.engine.round import RoundController
from src.engine.stats import GameStats, StatsTracker

__all__ = [
    # Data Classes
    "ParticipantState",
    "RoundConfig",
    "RoundSnapshot",
    "EventPayload",
    "GameStats",
    # Enums
    "CommandResult",
    "GrowthLaw",
    "RiskLaw",
    "RoundEvent",
    "RoundState",
    # Engines
    "RiskEngine",
    "RoundController",
    "StatsTracker",
]
