"""
Mail Service - Configuration.

Environment-sourced settings, read once at startup and immutable afterwards.
Mandatory account identity and credential must be present or the process
refuses to start.

Architecture Layer: Infrastructure
Principles: 12-Factor App, Configuration Externalization, Type Safety
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

from .exceptions import StartupConfigurationError

logger = structlog.get_logger(__name__)

DEFAULT_ENV_FILE = ".env"


class Environment(str, Enum):
    """Deployment environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class MailServiceSettings(BaseSettings):
    """Process configuration for the mail service."""
    # Account used to authenticate with the relay and as the From address
    email: str = Field(..., description="Mail account identity")
    password: SecretStr = Field(..., description="Mail account credential (app password)")

    port: int = Field(default=3001, ge=1, le=65535)
    listen_host: str = Field(default="0.0.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=587, ge=1, le=65535)
    smtp_timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)
    sender_name: str = Field(default="JUIT Robotics Hub")

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if v is None or not str(v).strip():
            raise ValueError("must not be empty")
        return str(v).strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("must not be empty")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION


def load_settings(env_file: str | Path | None = DEFAULT_ENV_FILE) -> MailServiceSettings:
    """
    Load settings from the environment and an optional dotenv file.

    Args:
        env_file: Path of the dotenv file to read, or None to read only the process environment.

    Returns:
        Frozen MailServiceSettings instance.

    Raises:
        StartupConfigurationError: If mandatory values are absent or any value is invalid.
    """
    try:
        settings = MailServiceSettings(_env_file=env_file)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
            for err in e.errors()
        ]
        raise StartupConfigurationError(problems) from e

    logger.info(
        "mail_config_loaded",
        environment=settings.environment.value,
        port=settings.port,
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
    )
    return settings
