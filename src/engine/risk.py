"""
Balloon Rush - Risk Engine

Pure functions mapping elapsed round time to the reward multiplier and
the multiplier to a per-tick crash probability. The crash draw itself takes
an injected random source so outcomes can be replayed from a seed.

The engine holds nothing but its configuration. Every method is a function
of its arguments only.
"""

import math
from typing import Protocol

from src.engine.base import GrowthLaw, RiskLaw, RoundConfig
from src.engine.validators import validate_elapsed, validate_tick_delta

# Converts per-tick risk into the 0-1 danger indicator shown on the balloon.
RISK_LEVEL_SCALE = 100.0


class RandomSource(Protocol):
    """Anything with a ``random()`` method returning a float in [0, 1)."""

    def random(self) -> float: ...


class RiskEngine:
    """
    Stateless multiplier and crash-risk calculator.

    Args:
        config: Round constants selecting and tuning the growth and risk laws
    """

    def __init__(self, config: RoundConfig | None = None) -> None:
        self.config = config or RoundConfig()

    # -- Multiplier growth -----------------------------------------------

    def multiplier_at(self, elapsed_ms: float) -> float:
        """Multiplier reached after ``elapsed_ms`` of flight.

        Monotonically non-decreasing, and exactly 1.0 at time zero.

        Raises:
            ValueError: If elapsed time is negative
        """
        elapsed_ms = validate_elapsed(elapsed_ms)
        if elapsed_ms == 0:
            return 1.0

        cfg = self.config
        if cfg.growth_law == GrowthLaw.STEPPED:
            step_rate = 1 + elapsed_ms / cfg.step_acceleration_ms
            steps = math.floor(elapsed_ms / cfg.step_interval_ms * step_rate)
            return 1.0 + steps * cfg.step_increment

        return cfg.growth_base ** (elapsed_ms / 1000)

    # -- Crash risk ------------------------------------------------------

    def crash_risk_per_tick(self, multiplier: float) -> float:
        """Probability that the balloon pops during the current tick.

        Zero below a 1.0 multiplier, weakly increasing, never above
        ``risk_cap``.
        """
        if multiplier < 1.0:
            return 0.0

        cfg = self.config
        if cfg.risk_law == RiskLaw.ZONED:
            log_multiplier = math.log2(multiplier)
            zone = math.floor(log_multiplier)
            progress = log_multiplier - zone
            risk = cfg.base_risk * 2 ** zone * (1 + progress)
        else:
            try:
                risk = cfg.base_risk * cfg.risk_growth_factor ** (multiplier - 1)
            except OverflowError:
                risk = cfg.risk_cap

        return min(risk, cfg.risk_cap)

    def crash_risk_for_interval(self, multiplier: float, dt_ms: float) -> float:
        """Crash probability for a tick lasting ``dt_ms``.

        With ``reference_tick_ms`` configured, the per-tick risk is treated
        as the risk of one reference tick and compounded over the actual
        interval, so survival per second does not depend on tick rate.
        Otherwise this is the plain per-tick risk.
        """
        risk = self.crash_risk_per_tick(multiplier)
        reference = self.config.reference_tick_ms
        if reference is None:
            return risk

        dt_ms = validate_tick_delta(dt_ms)
        if dt_ms == 0 or risk == 0:
            return 0.0
        return 1 - (1 - risk) ** (dt_ms / reference)

    def risk_level(self, multiplier: float) -> float:
        """Danger indicator in [0, 1] for presentation layers."""
        return min(self.crash_risk_per_tick(multiplier) * RISK_LEVEL_SCALE, 1.0)

    # -- Crash draw ------------------------------------------------------

    def should_crash(
        self,
        multiplier: float,
        rng: RandomSource,
        dt_ms: float | None = None,
    ) -> bool:
        """Draw once from ``rng`` and decide whether the balloon pops.

        Args:
            multiplier: Current shared multiplier
            rng: Random source; exactly one ``random()`` sample is taken
            dt_ms: Tick length, only used when tick-rate compensation is on

        Returns:
            True if the sample falls below the crash risk
        """
        if dt_ms is None:
            risk = self.crash_risk_per_tick(multiplier)
        else:
            risk = self.crash_risk_for_interval(multiplier, dt_ms)
        return rng.random() < risk
