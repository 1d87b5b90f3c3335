"""Centralized configuration management using pydantic-settings.

Configuration is loaded from environment variables with sensible defaults.
All settings can be overridden via environment variables or a .env file.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults for development. Override via
    environment variables (prefixed with FLEET_) or .env file.

    Examples:
        FLEET_DOCUMENT_STORE_URL=https://project.example.co
        FLEET_DOCUMENT_STORE_KEY=service-role-key
        FLEET_LOG_LEVEL=DEBUG
        FLEET_ENVIRONMENT=production
    """

    model_config = SettingsConfigDict(
        env_prefix="FLEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Fleet Finance"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: Literal["json", "console"] = Field(
        default=None,
        validate_default=True,
        description="Log output format; JSON in production and console elsewhere unless set",
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")

    # API Server
    # Default "0.0.0.0" binds to all interfaces; use 127.0.0.1 behind a proxy.
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = Field(
        default=False, description="Enable auto-reload (development only)"
    )
    api_workers: int = Field(default=1, ge=1, le=32)

    # Hosted document store (PostgREST-style REST endpoint)
    document_store_url: str | None = Field(
        default=None,
        description="Base URL of the hosted store. Submission is disabled when unset.",
    )
    document_store_key: str | None = Field(
        default=None, description="API key sent with every store request"
    )
    document_store_timeout: float = Field(default=10.0, gt=0)
    company_id: str | None = Field(
        default=None, description="Company id stamped onto submitted documents"
    )

    # Financing calculator defaults
    default_annual_rate: float = Field(default=7.99, ge=0)
    default_term_months: int = Field(default=60, gt=0)
    allowed_term_months: tuple[int, ...] = (36, 48, 60, 72)
    default_down_payment: float = Field(default=0, ge=0)

    @field_validator("debug", mode="before")
    @classmethod
    def set_debug_from_environment(cls, v: bool, info) -> bool:
        """Auto-enable debug in development environment."""
        if info.data.get("environment") == Environment.DEVELOPMENT:
            return True
        return v

    @field_validator("log_format", mode="before")
    @classmethod
    def set_log_format_from_environment(cls, v: str | None, info) -> str:
        """Default to JSON logging in production."""
        if v is None:
            env = info.data.get("environment")
            if env == Environment.PRODUCTION:
                return "json"
        return v or "console"

    @field_validator("document_store_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.rstrip("/") or None

    @model_validator(mode="after")
    def validate_default_term(self) -> "Settings":
        """The default term must be one the calculator offers."""
        if self.default_term_months not in self.allowed_term_months:
            raise ValueError(
                f"default_term_months={self.default_term_months} is not one of "
                f"allowed_term_months={list(self.allowed_term_months)}"
            )
        return self

    @property
    def document_store_enabled(self) -> bool:
        """Check if a document store is configured."""
        return bool(self.document_store_url)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload settings.

    Returns:
        Configured Settings instance.
    """
    return Settings()
