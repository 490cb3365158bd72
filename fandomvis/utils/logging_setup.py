"""Loguru sink setup shared by the CLI scripts."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from fandomvis.utils.config import LoggingConfig

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"


def configure_logging(
    config: LoggingConfig | None = None,
    *,
    verbose: bool = False,
    log_to_file: bool = True,
) -> None:
    """Replace the default loguru handler with console (and optional file) sinks."""
    config = config or LoggingConfig()
    level = "DEBUG" if verbose else config.level

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)

    if log_to_file and config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation=config.rotation,
            retention=config.retention,
            level="DEBUG",
        )
