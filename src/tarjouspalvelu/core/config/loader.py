"""
Reading ``tarjouspalvelu.yaml``.

The file is optional. Values may reference the environment as ``${VAR}`` or
``${VAR:-fallback}``, which keeps credentials out of the file itself.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import AppConfig


DEFAULT_CONFIG_PATH = Path("tarjouspalvelu.yaml")

# Overrides the default location when no path is passed
CONFIG_PATH_ENV = "TARJOUSPALVELU_CONFIG"

ENV_REFERENCE = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """The configuration file is missing, unreadable or invalid."""

    def __init__(self, message: str, path: Path | None = None, details: str | None = None):
        super().__init__(message)
        self.path = path
        self.details = details


def read_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML file whose top level must be a mapping.

    An empty file is an empty mapping.

    Raises:
        ConfigError: On I/O or YAML errors, or a non-mapping document
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}", path=path, details=str(e)) from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}", path=path, details=str(e)) from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigError(
            f"Expected a mapping at the top of {path}, got {type(document).__name__}",
            path=path,
        )
    return document


def expand_env_references(value: Any) -> Any:
    """Substitute ``${VAR}`` references in every string of a YAML tree.

    Unset variables without a fallback become empty strings.
    """
    if isinstance(value, dict):
        return {key: expand_env_references(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_references(item) for item in value]
    if isinstance(value, str):
        return ENV_REFERENCE.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), value)
    return value


def resolve_config_path(path: Path | str | None) -> tuple[Path, bool]:
    """Pick the file to load and whether it was asked for explicitly."""
    if path is not None:
        return Path(path), True
    from_env = os.environ.get(CONFIG_PATH_ENV)
    if from_env:
        return Path(from_env), True
    return DEFAULT_CONFIG_PATH, False


def load_app_config(
    path: Path | str | None = None,
    expand_env: bool = True,
) -> AppConfig:
    """Load and validate the application configuration.

    Args:
        path: Config file; defaults to ``$TARJOUSPALVELU_CONFIG``, then
            ``./tarjouspalvelu.yaml``
        expand_env: Substitute environment references before validating

    Returns:
        Validated configuration. Defaults when the default file does not exist.

    Raises:
        ConfigError: If an explicitly requested file is missing, or any
            file cannot be read, parsed or validated
    """
    config_path, explicit = resolve_config_path(path)

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {config_path}", path=config_path)
        return AppConfig()

    data = read_yaml(config_path)
    if expand_env:
        data = expand_env_references(data)

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {config_path}",
            path=config_path,
            details=str(e),
        ) from e
