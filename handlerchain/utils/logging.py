"""Loguru sink setup for command-line use."""

from __future__ import annotations

import sys

from loguru import logger

from handlerchain.config.schema import LoggingConfig


def configure_logging(config: LoggingConfig | None = None, *, verbose: bool = False) -> int:
    """Replace loguru's default sink with one stderr sink.

    Returns the sink id so callers can remove it again.
    """
    config = config or LoggingConfig()
    logger.remove()
    return logger.add(
        sys.stderr,
        level="DEBUG" if verbose else config.level,
        format=config.format,
        colorize=config.colorize,
    )
