"""
Balloon Rush - Application Settings

Loads configuration from environment variables using Pydantic Settings
and turns it into the immutable RoundConfig the engine consumes.
"""

import logging
from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings

from src.engine.base import GrowthLaw, RiskLaw, RoundConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Multiplier growth
    growth_law: GrowthLaw = GrowthLaw.EXPONENTIAL
    growth_base: float = Field(default=1.01, ge=1.0)
    step_increment: float = Field(default=0.01, gt=0)
    step_interval_ms: float = Field(default=500.0, gt=0)
    step_acceleration_ms: float = Field(default=1000.0, gt=0)

    # Crash risk
    risk_law: RiskLaw = RiskLaw.EXPONENTIAL
    base_risk: float = Field(default=0.001, ge=0, le=1)
    risk_growth_factor: float = Field(default=2.0, ge=1.0)
    risk_cap: float = Field(default=0.02, ge=0, lt=1)
    reference_tick_ms: Annotated[float, Field(gt=0)] | None = None

    # Scoring
    points_per_second: float = Field(default=10.0, ge=0)
    participant_count: int = Field(default=1, ge=1, le=2)

    # Driver
    tick_interval_ms: float = Field(default=1000 / 60, gt=0)

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    def to_round_config(self) -> RoundConfig:
        """Build the immutable engine configuration."""
        return RoundConfig(
            growth_law=self.growth_law,
            growth_base=self.growth_base,
            step_increment=self.step_increment,
            step_interval_ms=self.step_interval_ms,
            step_acceleration_ms=self.step_acceleration_ms,
            risk_law=self.risk_law,
            base_risk=self.base_risk,
            risk_growth_factor=self.risk_growth_factor,
            risk_cap=self.risk_cap,
            points_per_second=self.points_per_second,
            participant_count=self.participant_count,
            reference_tick_ms=self.reference_tick_ms,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
