"""
Logging setup for the addt CLI.

Modules log through logging.getLogger(__name__); the CLI calls
configure_logging() once. Level and destination come from the
environment:

    ADDT_LOG_LEVEL   DEBUG, INFO, WARNING or ERROR (default WARNING)
    ADDT_LOG_FILE    write to this file instead of stderr
"""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "addt"


class LogSettings(BaseSettings):
    """Logging configuration read from ADDT_LOG_* variables."""

    level: str = "WARNING"
    file: str | None = None

    model_config = SettingsConfigDict(env_prefix="ADDT_LOG_", case_sensitive=False)


def parse_level(level: str) -> int:
    """Map a level name to its number, defaulting to WARNING."""
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(settings: LogSettings | None = None) -> None:
    """Attach a single handler to the addt logger."""
    settings = settings or LogSettings()

    handler: logging.Handler
    if settings.file:
        handler = logging.FileHandler(settings.file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)

    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    logger.addHandler(handler)
    logger.setLevel(parse_level(settings.level))
