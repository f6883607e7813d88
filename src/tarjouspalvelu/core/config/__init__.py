"""Configuration loading and validation."""

from .models import (
    DEFAULT_BASE_URL,
    AppConfig,
    CredentialsConfig,
    LoggingConfig,
    PortalConfig,
)
from .loader import ConfigError, load_app_config

__all__ = [
    "DEFAULT_BASE_URL",
    "AppConfig",
    "CredentialsConfig",
    "LoggingConfig",
    "PortalConfig",
    "ConfigError",
    "load_app_config",
]
