"""Logging configuration for the crxpack command line."""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", format_string: Optional[str] = None) -> None:
    """Configure application-wide logging to stdout.

    Can be called more than once; later calls replace earlier handlers.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR). Case-insensitive.
        format_string: Custom format string. Defaults to timestamp, logger,
            level and message.

    Raises:
        ValueError: If level is not a known logging level
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    logging.basicConfig(level=numeric_level, handlers=[handler], force=True)
