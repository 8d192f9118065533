"""Environment configuration and validation.

This module defines strongly-typed application settings loaded from environment variables
(optionally via a local `.env` file).

Fallback exchange rates seed every new chat session and are what conversions use until the first
successful market refresh, so they are validated to be positive at startup.
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.finance.exchange import DEFAULT_CAD_TO_USD, DEFAULT_USD_TO_CAD
from src.rates.source import DEFAULT_RATE_SOURCE_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    telegram_bot_token: str = Field(alias="TELEGRAM_BOT_TOKEN")

    fallback_usd_to_cad: float = Field(default=DEFAULT_USD_TO_CAD, alias="FALLBACK_USD_TO_CAD")
    fallback_cad_to_usd: float = Field(default=DEFAULT_CAD_TO_USD, alias="FALLBACK_CAD_TO_USD")

    rate_source_url: str = Field(default=DEFAULT_RATE_SOURCE_URL, alias="RATE_SOURCE_URL")
    rate_fetch_timeout_s: float = Field(default=10.0, alias="RATE_FETCH_TIMEOUT_S")
    rate_refresh_enabled: bool = Field(default=True, alias="RATE_REFRESH_ENABLED")

    session_limit: int = Field(default=10_000, alias="SESSION_LIMIT")

    @field_validator(
        "fallback_usd_to_cad", "fallback_cad_to_usd", "rate_fetch_timeout_s", "session_limit"
    )
    @classmethod
    def validate_positive(cls, value: float | int) -> float | int:
        """Reject zero or negative rates, timeouts and session limits."""

        if value <= 0:
            raise ValueError("must be positive")
        return value


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is missing or invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
