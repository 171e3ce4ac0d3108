"""Tests for configuration system."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from funding_report.config import ExchangeCredentials, Settings, load_settings
from funding_report.models import CollectionMode, CyclePolicy


class TestSettings:
    def test_defaults(self):
        settings = Settings(config_file="nonexistent.yaml")
        assert settings.exchanges == ["binance", "phemex", "bybit", "mexc"]
        assert settings.funding_mode == CollectionMode.FULL_HISTORY
        assert settings.lookback_days == 90
        assert settings.window_hours == 24.0
        assert settings.gap_threshold_hours == 9.0
        assert settings.max_pages == 100
        assert settings.display_timezone == "Asia/Singapore"
        assert settings.log_level == "INFO"
        assert settings.api_port == 8000

    def test_case_insensitive_funding_mode(self):
        settings = Settings(funding_mode="WINDOWED", config_file="nonexistent.yaml")
        assert settings.funding_mode == CollectionMode.WINDOWED

    def test_invalid_funding_mode(self):
        with pytest.raises(ValidationError):
            Settings(funding_mode="forever", config_file="nonexistent.yaml")

    def test_cycle_policy_follows_mode(self):
        full = Settings(config_file="nonexistent.yaml")
        windowed = Settings(funding_mode="windowed", config_file="nonexistent.yaml")
        assert full.cycle_policy == CyclePolicy.LATEST_CYCLE
        assert windowed.cycle_policy == CyclePolicy.WINDOW_SUM

    def test_gap_threshold_ms(self):
        settings = Settings(gap_threshold_hours=9, config_file="nonexistent.yaml")
        assert settings.gap_threshold_ms == 9 * 60 * 60 * 1000

    def test_exchanges_lowercased(self):
        settings = Settings(exchanges=["Binance", "MEXC"], config_file="nonexistent.yaml")
        assert settings.exchanges == ["binance", "mexc"]

    def test_unknown_exchange(self):
        with pytest.raises(ValidationError):
            Settings(exchanges=["kraken"], config_file="nonexistent.yaml")

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError):
            Settings(display_timezone="Mars/Olympus", config_file="nonexistent.yaml")

    def test_lookback_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(lookback_days=0, config_file="nonexistent.yaml")

    def test_log_level_case_insensitive(self):
        s = Settings(log_level="debug", config_file="nonexistent.yaml")
        assert s.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="VERBOSE", config_file="nonexistent.yaml")

    def test_api_port_bounds(self):
        Settings(api_port=1, config_file="nonexistent.yaml")
        with pytest.raises(ValidationError):
            Settings(api_port=70000, config_file="nonexistent.yaml")

    def test_from_env_vars(self):
        env = {
            "BYBIT_API_KEY": "test-key",
            "BYBIT_SECRET_KEY": "test-secret",
            "LOOKBACK_DAYS": "30",
            "LOG_LEVEL": "DEBUG",
        }
        with patch.dict(os.environ, env, clear=False):
            settings = Settings(config_file="nonexistent.yaml")
            assert settings.bybit_api_key == "test-key"
            assert settings.lookback_days == 30
            assert settings.log_level == "DEBUG"

    def test_yaml_override(self, tmp_path):
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("log_level: DEBUG\nmax_pages: 20\n")
        settings = Settings(config_file=str(yaml_file))
        assert settings.log_level == "DEBUG"
        assert settings.max_pages == 20

    def test_yaml_file_not_found_is_ok(self):
        settings = Settings(config_file="definitely_nonexistent.yaml")
        assert settings.max_pages == 100

    def test_yaml_values_are_validated(self, tmp_path):
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text(
            "exchanges: [Binance, MEXC]\nfunding_mode: Windowed\nlog_level: debug\n"
        )
        settings = Settings(config_file=str(yaml_file))
        assert settings.exchanges == ["binance", "mexc"]
        assert settings.funding_mode == CollectionMode.WINDOWED
        assert settings.cycle_policy == CyclePolicy.WINDOW_SUM
        assert settings.log_level == "DEBUG"

    def test_invalid_yaml_value_rejected(self, tmp_path):
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("display_timezone: Mars/Olympus\n")
        with pytest.raises(ValidationError):
            Settings(config_file=str(yaml_file))

    def test_yaml_overrides_environment(self, tmp_path):
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("lookback_days: 7\n")
        with patch.dict(os.environ, {"LOOKBACK_DAYS": "30"}, clear=False):
            settings = Settings(config_file=str(yaml_file))
        assert settings.lookback_days == 7


class TestCredentials:
    def test_credentials_for(self):
        settings = Settings(
            phemex_api_key="k", phemex_secret_key="s", config_file="nonexistent.yaml"
        )
        creds = settings.credentials_for("PHEMEX")
        assert creds == ExchangeCredentials(api_key="k", secret_key="s")
        assert creds.configured

    def test_partial_credentials_not_configured(self):
        settings = Settings(mexc_api_key="k", config_file="nonexistent.yaml")
        assert not settings.credentials_for("mexc").configured

    def test_legacy_secret_variable(self):
        env = {"BINANCE_API_KEY": "k", "BINANCE_API_SECRET": "legacy"}
        with patch.dict(os.environ, env, clear=False):
            settings = Settings(config_file="nonexistent.yaml")
        assert settings.binance_secret_key == "legacy"
        assert settings.credentials_for("binance").configured

    def test_secret_key_variable_preferred(self):
        env = {"BYBIT_SECRET_KEY": "current", "BYBIT_API_SECRET": "legacy"}
        with patch.dict(os.environ, env, clear=False):
            settings = Settings(config_file="nonexistent.yaml")
        assert settings.bybit_secret_key == "current"


class TestLoadSettings:
    def test_load_with_overrides(self):
        settings = load_settings(log_level="ERROR", config_file="nonexistent.yaml")
        assert settings.log_level == "ERROR"
