"""
Balloon Rush - Survival Analysis

Because crash draws happen once per tick, how long a balloon survives
depends on both the configured laws and the tick rate of the driver.
This module computes the exact survival curve for a configuration and
tick length, runs Monte Carlo rounds through the real controller to
check it, and calibrates the base risk against a target survival rate
(for example "48% of balloons reach 2x").

Usage:
    config = RoundConfig()
    p = survival_probability(config, target_multiplier=2.0, tick_ms=16)

    report = simulate_rounds(config, n_rounds=10_000, tick_ms=16, seed=7)
    print(report.summary())

    tuned = calibrate_base_risk(config, 2.0, 0.48, tick_ms=16)
"""

from __future__ import annotations

import logging
import random
import statistics
from dataclasses import dataclass, field, replace

from src.engine.base import RoundConfig, RoundState
from src.engine.risk import RiskEngine
from src.engine.round import RoundController
from src.engine.validators import validate_positive, validate_probability

DEFAULT_MAX_TICKS = 1_000_000
DEFAULT_THRESHOLDS = (2.0, 4.0, 8.0)

logger = logging.getLogger(__name__)


def survival_probability(
    config: RoundConfig,
    target_multiplier: float,
    tick_ms: float,
    max_ticks: int = DEFAULT_MAX_TICKS,
) -> float:
    """Probability that a balloon reaches ``target_multiplier``.

    A balloon reaches the target when the multiplier at its crash tick
    (or any earlier tick) is at least the target. Ticks are assumed to be
    exactly ``tick_ms`` long.

    Returns:
        Survival probability in [0, 1]; 0.0 if the target is not reached
        within ``max_ticks``
    """
    tick_ms = validate_positive(tick_ms, "Tick length")
    engine = RiskEngine(config)

    survival = 1.0
    for k in range(1, max_ticks + 1):
        multiplier = engine.multiplier_at(k * tick_ms)
        if multiplier >= target_multiplier:
            return survival
        survival *= 1 - engine.crash_risk_for_interval(multiplier, tick_ms)
    return 0.0


def survival_curve(
    config: RoundConfig,
    tick_ms: float,
    thresholds: tuple[float, ...] = DEFAULT_THRESHOLDS,
) -> dict[float, float]:
    """Survival probability for each threshold multiplier."""
    return {
        threshold: survival_probability(config, threshold, tick_ms)
        for threshold in thresholds
    }


@dataclass
class SimulationReport:
    """Results of a Monte Carlo run of single-participant rounds."""

    n_rounds: int
    tick_ms: float
    crash_multipliers: list[float] = field(default_factory=list)
    crash_ticks: list[int] = field(default_factory=list)
    seed: int | None = None
    truncated_rounds: int = 0

    def survival_rate(self, target_multiplier: float) -> float:
        """Fraction of resolved rounds whose crash multiplier reached the target."""
        if not self.crash_multipliers:
            return 0.0
        reached = sum(1 for m in self.crash_multipliers if m >= target_multiplier)
        return reached / len(self.crash_multipliers)

    @property
    def median_crash_multiplier(self) -> float:
        return statistics.median(self.crash_multipliers) if self.crash_multipliers else 1.0

    @property
    def mean_ticks(self) -> float:
        return statistics.fmean(self.crash_ticks) if self.crash_ticks else 0.0

    def summary(self) -> str:
        lines = [
            f"{self.n_rounds} rounds at {self.tick_ms:g} ms/tick",
            f"  median crash: {self.median_crash_multiplier:.2f}x",
            f"  mean ticks survived: {self.mean_ticks:.1f}",
        ]
        if self.truncated_rounds:
            lines.append(f"  still flying at tick limit: {self.truncated_rounds}")
        for threshold in DEFAULT_THRESHOLDS:
            lines.append(f"  reached {threshold:g}x: {self.survival_rate(threshold):.1%}")
        return "\n".join(lines)


def simulate_rounds(
    config: RoundConfig,
    n_rounds: int,
    tick_ms: float,
    seed: int | None = None,
    max_ticks: int = DEFAULT_MAX_TICKS,
) -> SimulationReport:
    """Play ``n_rounds`` rounds to resolution with fixed-length ticks.

    Only the first participant is simulated; participants draw
    independently so one is representative. Each round gets a fresh
    controller sharing one random source. A round still playing after
    ``max_ticks`` is counted in ``truncated_rounds`` and left out of the
    crash lists.
    """
    tick_ms = validate_positive(tick_ms, "Tick length")
    solo = replace(config, participant_count=1)
    rng = random.Random(seed)

    report = SimulationReport(n_rounds=n_rounds, tick_ms=tick_ms, seed=seed)
    for _ in range(n_rounds):
        controller = RoundController(solo, rng=rng, clock=lambda: 0.0)
        controller.start()
        snapshot = controller.snapshot()
        while snapshot.state == RoundState.PLAYING and snapshot.tick_count < max_ticks:
            snapshot = controller.tick(tick_ms)

        if not snapshot.is_resolved:
            report.truncated_rounds += 1
            continue
        report.crash_multipliers.append(snapshot.multiplier)
        report.crash_ticks.append(snapshot.tick_count)

    if report.truncated_rounds:
        logger.warning(
            "%d of %d rounds still flying after %d ticks",
            report.truncated_rounds, n_rounds, max_ticks,
        )
    return report


def calibrate_base_risk(
    config: RoundConfig,
    target_multiplier: float,
    target_survival: float,
    tick_ms: float,
    tolerance: float = 1e-4,
    max_iterations: int = 100,
) -> RoundConfig:
    """Find the base risk giving ``target_survival`` at ``target_multiplier``.

    Survival falls as base risk rises, so the search bisects between
    zero and the risk cap.

    Returns:
        Copy of ``config`` with the calibrated ``base_risk``

    Raises:
        ValueError: If the target survival cannot be reached below the cap
    """
    target_survival = validate_probability(target_survival, "Target survival")

    def survival_at(base_risk: float) -> float:
        return survival_probability(replace(config, base_risk=base_risk), target_multiplier, tick_ms)

    low, high = 0.0, config.risk_cap
    if survival_at(high) > target_survival:
        raise ValueError(
            f"Survival {target_survival} at {target_multiplier}x is unreachable "
            f"with risk cap {config.risk_cap}."
        )

    for _ in range(max_iterations):
        mid = (low + high) / 2
        survival = survival_at(mid)
        if abs(survival - target_survival) <= tolerance:
            return replace(config, base_risk=mid)
        if survival > target_survival:
            low = mid
        else:
            high = mid
    return replace(config, base_risk=(low + high) / 2)
