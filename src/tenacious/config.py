"""Configuration management for tenacious using Pydantic Settings.

Configuration is loaded from environment variables and/or .env files.
Environment variables take precedence over .env file values.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TenableSettings(BaseSettings):
    """Tenable.io / Nessus connection settings."""

    model_config = SettingsConfigDict(env_prefix="TENABLE_")

    base_url: str = Field(
        default="https://cloud.tenable.com",
        description="API base URL",
    )
    access_key: str | None = Field(
        default=None,
        description="API access key",
    )
    secret_key: SecretStr | None = Field(
        default=None,
        description="API secret key",
    )
    username: str | None = Field(
        default=None,
        description="Username for session authentication (Nessus)",
    )
    password: SecretStr | None = Field(
        default=None,
        description="Password for session authentication (Nessus)",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify TLS certificates",
    )
    timeout: int = Field(
        default=30,
        ge=5,
        le=300,
        description="Per-request timeout in seconds",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Remove trailing slashes so paths can be appended directly."""
        return v.rstrip("/") if isinstance(v, str) else v

    @property
    def has_api_keys(self) -> bool:
        """Check if API key authentication is configured."""
        return self.access_key is not None and self.secret_key is not None

    @property
    def has_credentials(self) -> bool:
        """Check if session authentication is configured."""
        return self.username is not None and self.password is not None


class RetrySettings(BaseSettings):
    """Retry and backoff settings for API calls."""

    model_config = SettingsConfigDict(env_prefix="RETRY_")

    max_attempts: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Attempts per call before giving up",
    )
    min_backoff: float = Field(
        default=0.1,
        gt=0,
        description="Shortest wait between attempts in seconds",
    )
    max_backoff: float = Field(
        default=60.0,
        gt=0,
        description="Longest wait between attempts in seconds",
    )
    factor: float = Field(
        default=1.5,
        ge=1,
        description="Backoff growth factor per attempt",
    )
    jitter: bool = Field(
        default=True,
        description="Randomize waits between attempts",
    )


class Settings(BaseSettings):
    """Main application settings.

    All settings can be configured via environment variables.
    Nested settings use double underscores, e.g., TENABLE__BASE_URL.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    tenable: TenableSettings = Field(default_factory=TenableSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings instance, cached for reuse.
    """
    return Settings()
