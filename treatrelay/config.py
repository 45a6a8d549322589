"""Configuration loading for the treat relay.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Watch target
    watched_account: str = Field(
        default="",
        validation_alias=AliasChoices("PUBLIC_KEY_TO_WATCH", "WATCHED_ACCOUNT"),
        description="Account whose incoming native transfers fire the trigger",
    )

    # Trigger (actuator) configuration
    trigger_url: str = Field(
        default="",
        validation_alias=AliasChoices("VSH_TRIGGER_URL", "TRIGGER_URL"),
        description="URL called to fire the actuator",
    )
    trigger_method: Literal["GET", "POST", "PUT"] = Field(
        default="GET",
        description="HTTP method used for the trigger call",
    )
    trigger_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for the trigger call in seconds",
    )
    cooldown_ms: int = Field(
        default=10_000,
        validation_alias=AliasChoices("MIN_TREAT_INTERVAL_MS", "COOLDOWN_MS"),
        description="Minimum interval between trigger calls in milliseconds",
    )

    # Webhook configuration
    webhook_secret: str = Field(
        default="",
        description="Shared secret expected on webhook deliveries",
    )
    webhook_secret_header: str = Field(
        default="x-webhook-secret",
        description="Header carrying the shared secret",
    )
    webhook_require_auth: bool = Field(
        default=True,
        description="Require the shared secret on webhook deliveries",
    )
    webhook_path: str = Field(
        default="/helius",
        description="Path the provider posts deliveries to",
    )
    webhook_host: str = Field(
        default="0.0.0.0",
        description="Host to listen on for webhook server",
    )
    webhook_port: int = Field(
        default=8080,
        validation_alias=AliasChoices("PORT", "WEBHOOK_PORT"),
        description="Port to listen on for webhook server",
    )
    expose_error_details: bool = Field(
        default=True,
        description="Include exception messages in 500 response bodies",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("trigger_method", mode="before")
    @classmethod
    def normalize_trigger_method(cls, v: object) -> object:
        """Accept lower-case method names."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("trigger_timeout_seconds")
    @classmethod
    def validate_trigger_timeout(cls, v: float) -> float:
        """Ensure trigger timeout is positive."""
        if v <= 0:
            raise ValueError("trigger_timeout_seconds must be positive")
        return v

    @field_validator("cooldown_ms")
    @classmethod
    def validate_cooldown(cls, v: int) -> int:
        """Ensure cooldown is non-negative."""
        if v < 0:
            raise ValueError("cooldown_ms must be non-negative")
        return v

    @field_validator("webhook_path")
    @classmethod
    def validate_webhook_path(cls, v: str) -> str:
        """Ensure webhook path is absolute."""
        if not v.startswith("/"):
            raise ValueError("webhook_path must start with '/'")
        return v

    @field_validator("webhook_port")
    @classmethod
    def validate_webhook_port(cls, v: int) -> int:
        """Ensure webhook port is in valid range."""
        if v <= 0 or v > 65535:
            raise ValueError("webhook_port must be between 1 and 65535")
        return v

    def missing_required(self) -> list[str]:
        """Names of settings that must be set before the relay can start."""
        missing = []
        if not self.watched_account.strip():
            missing.append("PUBLIC_KEY_TO_WATCH")
        if not self.trigger_url.strip():
            missing.append("VSH_TRIGGER_URL")
        if self.webhook_require_auth and not self.webhook_secret:
            missing.append("WEBHOOK_SECRET")
        return missing


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
