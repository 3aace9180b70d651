"""
Balloon Rush - Round Event Definitions

Event types and payloads emitted by the round controller. The transport
(in-process callback, message queue, socket) is up to the collaborator
that subscribes.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable


class RoundEvent(Enum):
    """Events that can occur during a round."""

    STATE_CHANGED = auto()
    SCORE_UPDATED = auto()
    PARTICIPANT_CRASHED = auto()
    PARTICIPANT_LANDED = auto()
    ROUND_RESOLVED = auto()
    ROUND_RESET = auto()


@dataclass
class EventPayload:
    """Wrapper for round event data."""

    event: RoundEvent
    round_id: str | None
    participant_id: int | None = None
    data: dict[str, Any] = field(default_factory=dict)


EventListener = Callable[[EventPayload], None]
