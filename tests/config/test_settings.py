"""Tests for src/config/settings.py: environment settings and RoundConfig."""

import logging

import pytest
from pydantic import ValidationError

from src.config.settings import Settings, configure_logging, get_settings
from src.engine.base import GrowthLaw, RiskLaw, RoundConfig


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults_match_round_config(self):
        assert Settings().to_round_config() == RoundConfig()

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GROWTH_LAW", "stepped")
        monkeypatch.setenv("RISK_LAW", "zoned")
        monkeypatch.setenv("PARTICIPANT_COUNT", "2")
        monkeypatch.setenv("RISK_CAP", "0.015")

        config = Settings().to_round_config()

        assert config.growth_law is GrowthLaw.STEPPED
        assert config.risk_law is RiskLaw.ZONED
        assert config.participant_count == 2
        assert config.risk_cap == 0.015

    def test_reference_tick_optional(self, monkeypatch):
        monkeypatch.setenv("REFERENCE_TICK_MS", "16")
        assert Settings().to_round_config().reference_tick_ms == 16.0

    @pytest.mark.parametrize(
        "name,value",
        [
            ("PARTICIPANT_COUNT", "3"),
            ("RISK_CAP", "1.0"),
            ("GROWTH_BASE", "0.5"),
            ("TICK_INTERVAL_MS", "0"),
        ],
    )
    def test_invalid_values_rejected(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestConfigureLogging:
    def test_applies_log_level(self):
        configure_logging(Settings(log_level="warning"))
        assert logging.getLogger().level == logging.WARNING

    def test_debug_overrides_level(self):
        configure_logging(Settings(debug=True, log_level="ERROR"))
        assert logging.getLogger().level == logging.DEBUG
