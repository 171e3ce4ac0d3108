"""Configuration system using pydantic-settings with .env and optional YAML override."""

from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from funding_report.models.base import CollectionMode, CyclePolicy, ExchangeId


class ExchangeCredentials(BaseModel):
    """API credentials handed to one exchange adapter."""

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    secret_key: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.secret_key)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and optional YAML config."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Binance USDM futures. Each secret may also come from the older
    # *_API_SECRET variable name
    binance_api_key: str = ""
    binance_secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("binance_secret_key", "binance_api_secret"),
    )

    # Phemex
    phemex_api_key: str = ""
    phemex_secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("phemex_secret_key", "phemex_api_secret"),
    )

    # Bybit
    bybit_api_key: str = ""
    bybit_secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("bybit_secret_key", "bybit_api_secret"),
    )

    # MEXC
    mexc_api_key: str = ""
    mexc_secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("mexc_secret_key", "mexc_api_secret"),
    )

    # Exchanges in report order
    exchanges: list[str] = Field(
        default_factory=lambda: [e.value for e in ExchangeId]
    )

    # Funding collection
    funding_mode: CollectionMode = CollectionMode.FULL_HISTORY
    lookback_days: int = Field(default=90, ge=1)
    window_hours: float = Field(default=24.0, gt=0)
    gap_threshold_hours: float = Field(default=9.0, gt=0)
    max_pages: int = Field(default=100, ge=1)

    # Per-exchange pacing overrides in seconds, e.g. {"bybit": 0.5}
    request_interval_overrides: dict[str, float] = Field(default_factory=dict)

    # Output
    display_timezone: str = "Asia/Singapore"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # HTTP API
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=8000, ge=1, le=65535)

    # Config file path
    config_file: str = ""

    @field_validator("funding_mode", mode="before")
    @classmethod
    def validate_funding_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("exchanges")
    @classmethod
    def validate_exchanges(cls, v: list[str]) -> list[str]:
        known = {e.value for e in ExchangeId}
        names = [name.lower() for name in v]
        unknown = [name for name in names if name not in known]
        if unknown:
            raise ValueError(f"Unknown exchanges: {unknown}. Known: {sorted(known)}")
        return names

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @model_validator(mode="before")
    @classmethod
    def apply_yaml_overrides(cls, data: Any) -> Any:
        """Apply overrides from YAML config file if specified.

        Runs before field validation so YAML values are checked the same way
        as environment values.
        """
        if not isinstance(data, dict):
            return data
        config_file = data.get("config_file") or ""
        config_path = Path(config_file) if config_file else Path("config.yaml")
        if config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f)
            if yaml_config and isinstance(yaml_config, dict):
                overrides = {
                    key: value
                    for key, value in yaml_config.items()
                    if key in cls.model_fields
                }
                data = {**data, **overrides}
        return data

    @property
    def cycle_policy(self) -> CyclePolicy:
        """Full history needs cycle discovery; a short window is summed whole."""
        if self.funding_mode == CollectionMode.WINDOWED:
            return CyclePolicy.WINDOW_SUM
        return CyclePolicy.LATEST_CYCLE

    @property
    def gap_threshold_ms(self) -> int:
        return int(self.gap_threshold_hours * 3600 * 1000)

    def credentials_for(self, exchange: str) -> ExchangeCredentials:
        """Return the credentials configured for an exchange."""
        name = exchange.lower()
        return ExchangeCredentials(
            api_key=getattr(self, f"{name}_api_key", ""),
            secret_key=getattr(self, f"{name}_secret_key", ""),
        )


def load_settings(**overrides: Any) -> Settings:
    """Create a Settings instance with optional overrides."""
    return Settings(**overrides)
