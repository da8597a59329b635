"""
Configuration settings for the timeout-aware retry layer.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "httpx-timeout-retry"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # "production" switches logs to JSON

    # === HTTP Client ===
    HTTP_BASE_URL: str = "http://localhost:3333"
    HTTP_TIMEOUT: Optional[float] = Field(30.0, gt=0)  # seconds, None = no timeout
    HTTP_MAX_CONNECTIONS: int = Field(100, gt=0)
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = Field(20, ge=0)

    # === Retry ===
    RETRY_MAX_RETRIES: int = Field(3, ge=0)
    RETRY_DELAY_STRATEGY: Literal["none", "linear", "exponential"] = "linear"
    RETRY_DELAY_SECONDS: float = Field(1.0, ge=0.0)  # linear step / exponential base
    RETRY_MAX_DELAY_SECONDS: Optional[float] = Field(30.0, ge=0.0)  # exponential cap
    RETRY_JITTER: float = Field(0.0, ge=0.0, le=1.0)
    RETRY_NETWORK_ERRORS_ONLY: bool = False
    RETRY_ON_STATUS: bool = True  # error statuses raise so they can be retried
    RETRY_STATUS_CODES: list[int] = Field(default_factory=list)  # empty: 429 and 5xx


# Global settings instance
settings = Settings()
