"""Logging configuration for rest-harness.

The library logs through the 'rest_harness' logger hierarchy and stays
silent unless the application configures logging.

Example:
    >>> import logging
    >>> logging.getLogger("rest_harness").setLevel(logging.DEBUG)

"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

logger = logging.getLogger("rest_harness")

logger.setLevel(logging.WARNING)

# Prevents "No handler found" warnings in applications that never configure logging
logger.addHandler(logging.NullHandler())


def configure_logging(
    level: int = logging.INFO,
    format_string: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Attach a stream handler to the library logger.

    Meant for scripts and the CLI. Applications should configure logging
    through their own setup instead.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
        format_string: Custom format string for log messages.
        stream: Output stream (defaults to sys.stderr).

    Example:
        >>> from rest_harness.utils.logger import configure_logging
        >>> configure_logging(level=logging.DEBUG)

    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    if stream is None:
        stream = sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(format_string))

    logger.addHandler(handler)
    logger.setLevel(level)
