"""
Pydantic configuration models for the portal client.

These models provide type-safe configuration with validation for:
- Portal connection settings
- Login credentials
- Logging
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from tarjouspalvelu.core.models import DEFAULT_BASE_URL, Language


# =============================================================================
# Portal Configuration
# =============================================================================


class PortalConfig(BaseModel):
    """Connection settings for the portal."""

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Portal root URL, without trailing slash",
    )
    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Request timeout in seconds",
    )
    user_agent: str | None = Field(
        default=None,
        description="Custom User-Agent header",
    )
    default_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers sent with every request",
    )
    language: Language | None = Field(
        default=None,
        description="Language to switch new sessions to",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")


class CredentialsConfig(BaseModel):
    """Portal login credentials."""

    username: str | None = Field(
        default_factory=lambda: os.environ.get("TP_USERNAME"),
        description="Login user name (default: $TP_USERNAME)",
    )
    password: str | None = Field(
        default_factory=lambda: os.environ.get("TP_PASSWORD"),
        description="Login password (default: $TP_PASSWORD)",
        repr=False,
    )

    @property
    def is_complete(self) -> bool:
        """Check if both user name and password are set."""
        return bool(self.username and self.password)


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(default="INFO", description="Log level")
    file: Path | None = Field(default=None, description="Log file path")
    json_format: bool = Field(default=True, description="Write JSON lines to the log file")
    rich_console: bool = Field(default=True, description="Use Rich for console output")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Top-level application configuration."""

    portal: PortalConfig = Field(default_factory=PortalConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
