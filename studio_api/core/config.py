"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (serverless platforms inject env vars directly)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


DAY_MS = 24 * 60 * 60 * 1000


def parse_csv(value: str | None) -> list[str]:
    """Split a comma-separated setting into trimmed, non-empty items.

    Examples:
        >>> parse_csv("a@example.com, b@example.com ")
        ['a@example.com', 'b@example.com']
        >>> parse_csv(None)
        []
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class LLMSettings(BaseSettings):
    """LLM provider configuration for vision, image and text generation."""

    provider: str = Field(
        "openai",
        description="LLM provider name (only 'openai' is supported)",
    )
    api_key: str | None = Field(
        None,
        validation_alias=AliasChoices("LLM_API_KEY", "OPENAI_API_KEY"),
        description="API key for the provider",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint (e.g. an OpenAI-compatible proxy)",
    )
    timeout_seconds: float = Field(
        120.0,
        description="Request timeout in seconds (image generation is slow)",
    )
    vision_model: str = Field("gpt-4o", description="Model used to describe the pet photo")
    vision_max_tokens: int = Field(300, ge=1)
    image_model: str = Field("dall-e-3", description="Model used to paint the portrait")
    image_size: str = Field("1024x1792")
    image_quality: str = Field("hd")
    text_model: str = Field("gpt-4o-mini", description="Model used for blog posts")
    text_temperature: float = Field(0.7, ge=0.0, le=2.0)
    text_max_tokens: int = Field(4000, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
        populate_by_name=True,
    )


class MailingListSettings(BaseSettings):
    """MailerLite subscriber registration. Disabled when no api_key is set."""

    api_key: str | None = Field(None, description="MailerLite API token")
    base_url: str = Field("https://connect.mailerlite.com")
    group_id: str = Field(
        "169718727485425367",
        description="Group new subscribers are added to",
    )
    timeout_seconds: float = Field(10.0)

    model_config = SettingsConfigDict(
        env_prefix="MAILERLITE_",
        case_sensitive=False,
    )


class RateLimitSettings(BaseSettings):
    """Per-email and per-IP admission limits for portrait generation."""

    enabled: bool = Field(
        False,
        description="Enable rate limiting of the portrait endpoint",
    )
    email_limit: int = Field(5, ge=1, description="Portraits per email per window")
    email_window_ms: int = Field(DAY_MS, ge=1, description="Email window in milliseconds")
    ip_limit: int = Field(7, ge=1, description="Portraits per client IP per window")
    ip_window_ms: int = Field(DAY_MS, ge=1, description="IP window in milliseconds")
    whitelist: str | None = Field(
        None,
        description="Comma-separated emails that bypass rate limiting",
    )

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
    )

    @property
    def whitelisted_emails(self) -> frozenset[str]:
        return frozenset(email.lower() for email in parse_csv(self.whitelist))


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    cors_origins: str = Field(
        "*",
        description="Comma-separated list of allowed CORS origins",
    )
    max_image_size_mb: int = Field(
        20,
        ge=1,
        description="Maximum decoded pet photo size in megabytes",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO")
    format: str = Field("json", description="'json' or 'plain'")
    output: str = Field("stdout", description="'stdout' or 'file'")
    file_path: str | None = Field(None)
    max_bytes: int = Field(10 * 1024 * 1024, ge=0)
    backup_count: int = Field(5, ge=0)
    request_id_header: str = Field("X-Request-ID")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


def _build_llm_settings() -> LLMSettings:
    return LLMSettings()


def _build_mailing_list_settings() -> MailingListSettings:
    return MailingListSettings()


def _build_rate_limit_settings() -> RateLimitSettings:
    return RateLimitSettings()


def _build_app_settings() -> AppSettings:
    return AppSettings()


def _build_log_settings() -> LogSettings:
    return LogSettings()


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    llm: LLMSettings = Field(default_factory=_build_llm_settings)
    mailing_list: MailingListSettings = Field(default_factory=_build_mailing_list_settings)
    rate_limit: RateLimitSettings = Field(default_factory=_build_rate_limit_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
