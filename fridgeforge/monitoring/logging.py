"""Logging setup for the command line."""

from __future__ import annotations

import logging

from fridgeforge.config.settings import get_settings

# httpx logs every request at INFO, which would bury the scan output
_NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger; ``level`` overrides ``LOG_LEVEL``."""

    name = (level or get_settings().log_level).upper()
    resolved = getattr(logging, name, logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    if resolved > logging.DEBUG:
        for noisy in _NOISY_LOGGERS:
            logging.getLogger(noisy).setLevel(logging.WARNING)
