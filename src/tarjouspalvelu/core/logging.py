"""
Logging for the portal client.

Library modules log through ``logging.getLogger(__name__)`` and attach
portal context (company, slug, notice, operation) with ``extra=``. The CLI
wires those records to a Rich console and, optionally, a JSON-lines file.
Session cookies never reach a handler in clear text.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rich.console import Console

    from tarjouspalvelu.core.config.models import LoggingConfig


ROOT_LOGGER = "tarjouspalvelu"

# Attributes passed with extra= that are carried into JSON lines
CONTEXT_FIELDS = ("company_id", "slug", "notice_id", "url", "operation", "language")

# Cookie values of the portal session, masked wherever they appear
SECRET_COOKIES = re.compile(r"(ASP\.NET_SessionId_TP|TarjPalv)=([^;\s]+)")

LEVEL_STYLES = {
    logging.DEBUG: "dim",
    logging.INFO: "default",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bold red",
}

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s | %(message)s"


def mask_secrets(text: str) -> str:
    """Replace session id and token cookie values with ``***``."""
    return SECRET_COOKIES.sub(r"\1=***", text)


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the portal context fields present on a record."""
    return {key: getattr(record, key) for key in CONTEXT_FIELDS if hasattr(record, key)}


class SecretsFilter(logging.Filter):
    """Mask session cookies in messages before any handler formats them."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_secrets(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


# =============================================================================
# File output
# =============================================================================


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the portal context flattened in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            entry["exception"] = mask_secrets(self.formatException(record.exc_info))
        return json.dumps(entry, default=str, ensure_ascii=False)


# =============================================================================
# Console output
# =============================================================================


class RichConsoleHandler(logging.Handler):
    """Print records to a Rich console, prefixed with the company they concern."""

    def __init__(self, console: "Console | None" = None, level: int = logging.INFO):
        super().__init__(level)
        if console is None:
            from rich.console import Console
            console = Console(stderr=True)
        self.console = console

    def prefix(self, record: logging.LogRecord) -> str:
        target = getattr(record, "slug", None) or getattr(record, "company_id", None)
        if target is None:
            return ""
        return f"[cyan][{target}][/cyan] "

    def emit(self, record: logging.LogRecord) -> None:
        try:
            style = LEVEL_STYLES.get(record.levelno, "default")
            self.console.print(
                f"{self.prefix(record)}[{style}]{self.format(record)}[/{style}]",
                markup=True,
                highlight=False,
            )
            if record.exc_info:
                self.console.print_exception()
        except Exception:
            self.handleError(record)


# =============================================================================
# Setup
# =============================================================================


def setup_logging(config: "LoggingConfig | None" = None, verbose: bool = False) -> logging.Logger:
    """Attach console and file handlers to the package logger.

    Calling it again replaces the handlers of the previous call.

    Args:
        config: Logging settings (default: INFO to a Rich console, no file)
        verbose: Force DEBUG on the console, showing every portal request

    Returns:
        The package root logger
    """
    if config is None:
        from tarjouspalvelu.core.config.models import LoggingConfig
        config = LoggingConfig()

    level = logging.DEBUG if verbose else getattr(logging, config.level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if config.file else level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    secrets = SecretsFilter()

    if config.rich_console:
        console: logging.Handler = RichConsoleHandler(level=level)
        console.setFormatter(logging.Formatter("%(message)s"))
    else:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(PLAIN_FORMAT))
    console.addFilter(secrets)
    logger.addHandler(console)

    if config.file:
        path = Path(config.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter() if config.json_format else logging.Formatter(PLAIN_FORMAT))
        file_handler.addFilter(secrets)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger below the package root, e.g. ``get_logger("cli")``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)
