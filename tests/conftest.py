"""
Balloon Rush - Test Configuration and Fixtures

Common fixtures and test doubles for all test modules.
"""

from collections.abc import Iterable

import pytest

from src.engine.base import RoundConfig
from src.engine.events import EventPayload, RoundEvent


# =============================================================================
# TEST DOUBLES
# =============================================================================

class ScriptedRandom:
    """Random source returning scripted draws, then a fixed fallback."""

    def __init__(self, values: Iterable[float] = (), fallback: float = 0.999) -> None:
        self._values = list(values)
        self.fallback = fallback
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        if self._values:
            return self._values.pop(0)
        return self.fallback


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class EventRecorder:
    """Collects every payload it receives."""

    def __init__(self) -> None:
        self.payloads: list[EventPayload] = []

    def __call__(self, payload: EventPayload) -> None:
        self.payloads.append(payload)

    def of(self, event: RoundEvent) -> list[EventPayload]:
        return [p for p in self.payloads if p.event == event]

    @property
    def events(self) -> list[RoundEvent]:
        return [p.event for p in self.payloads]

    def clear(self) -> None:
        self.payloads.clear()


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def scripted_rng() -> type[ScriptedRandom]:
    """Factory for random sources with scripted draws."""
    return ScriptedRandom


@pytest.fixture
def never_crash() -> ScriptedRandom:
    """RNG whose draws never fall below any capped risk."""
    return ScriptedRandom(fallback=0.999)


@pytest.fixture
def always_crash() -> ScriptedRandom:
    """RNG whose draws fall below any positive risk."""
    return ScriptedRandom(fallback=0.0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def solo_config() -> RoundConfig:
    """Single balloon, reference growth of 1.01x per second."""
    return RoundConfig(growth_base=1.01, points_per_second=10, participant_count=1)


@pytest.fixture
def duo_config() -> RoundConfig:
    """Two balloons racing on the same multiplier."""
    return RoundConfig(growth_base=1.01, points_per_second=10, participant_count=2)
