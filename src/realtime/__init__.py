"""
Balloon Rush Realtime Layer.

Event fan-out, snapshot models, and the session driver that ticks rounds.
"""

from src.realtime.dispatcher import EventDispatcher
from src.realtime.models import ParticipantModel, RoundSnapshotModel
from src.realtime.session import RoundSession

__all__ = [
    "EventDispatcher",
    "ParticipantModel",
    "RoundSession",
    "RoundSnapshotModel",
]
