# src/tomanrate/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
All values are deploy-time constants read from environment variables
(optionally from a .env file); nothing here is mutated at runtime.

Files that USE this module:
- tomanrate.app (loads settings for server and logging configuration)
- tomanrate.adapters.http.api (reads the API key per request)
- tomanrate.application.rates_service (builds the default service)

Files that this module USES:
- tomanrate.domain.policy (RefreshThresholds value object)
- tomanrate.shared.validators (API key validation)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator, model_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from tomanrate.domain.policy import RefreshThresholds
from tomanrate.shared.validators import validate_api_key


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Navasan API ---
    navasan_key: str = Field(default="", alias="NAVASAN_API_KEY")
    navasan_base_url: str = Field(default="https://api.navasan.tech", alias="NAVASAN_BASE_URL")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=8, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- Quota and refresh thresholds ---
    monthly_limit: int = Field(default=120, alias="MONTHLY_LIMIT", ge=1)
    fresh_threshold_hours: float = Field(default=1, alias="FRESH_THRESHOLD_HOURS", gt=0)
    stale_threshold_hours: float = Field(default=24, alias="STALE_THRESHOLD_HOURS", gt=0)
    conservation_threshold: int = Field(default=5, alias="CONSERVATION_THRESHOLD", ge=0)
    conservation_interval_hours: float = Field(default=12, alias="CONSERVATION_INTERVAL_HOURS", gt=0)

    # --- Persistence ---
    rate_log_file: Path = Field(default=Path("./data/exchange_rates.jsonl"), alias="RATE_LOG_FILE")
    usage_log_file: Path = Field(default=Path("./data/api_usage.jsonl"), alias="USAGE_LOG_FILE")

    # --- Server ---
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT", ge=1, le=65535)

    # --- Logging (for server deployment) ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="TOMANRATE_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @field_validator("navasan_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        """Treat a whitespace-only key as not configured."""
        return v.strip()

    @field_validator("navasan_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def check_threshold_order(self) -> "Settings":
        """Stale must come after fresh, and conservation must sit between them."""
        if self.stale_threshold_hours <= self.fresh_threshold_hours:
            raise ValueError("STALE_THRESHOLD_HOURS must be greater than FRESH_THRESHOLD_HOURS")
        if not (self.fresh_threshold_hours <= self.conservation_interval_hours <= self.stale_threshold_hours):
            raise ValueError(
                "CONSERVATION_INTERVAL_HOURS must be between FRESH_THRESHOLD_HOURS and STALE_THRESHOLD_HOURS"
            )
        return self

    @property
    def api_key_configured(self) -> bool:
        """Whether a usable Navasan API key is present."""
        return validate_api_key(self.navasan_key)

    def thresholds(self) -> RefreshThresholds:
        """
        Build the refresh thresholds handed to the refresh policy.

        Returns:
            RefreshThresholds populated from these settings
        """
        return RefreshThresholds(
            fresh_hours=self.fresh_threshold_hours,
            stale_hours=self.stale_threshold_hours,
            conservation_threshold=self.conservation_threshold,
            conservation_interval_hours=self.conservation_interval_hours,
            monthly_limit=self.monthly_limit,
        )


# Global settings instance
settings = Settings()


# ============================================================================
# Deployment Instructions
# ============================================================================
#
# 1. Put the Navasan key in .env:
#    NAVASAN_API_KEY=your-key
#
# 2. Run the service in the background:
#    nohup tomanrate > tomanrate.log 2>&1 &
#
# 3. Query it:
#    curl -i http://localhost:8000/api/exchange-rate
#
# 4. Stop it:
#    pkill -f tomanrate
#
# ============================================================================
