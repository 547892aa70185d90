"""Minimal logging utilities for marginalia.

Provides a simple get_logger function that wraps the standard library logging.
The library never installs handlers; applications decide where records go.

Example:
    >>> from marginalia.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Annotation rejected")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "marginalia." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("scanning")
        >>> logger.name
        'marginalia.scanning'
    """
    if not (name == "marginalia" or name.startswith("marginalia.")):
        name = f"marginalia.{name}"
    return logging.getLogger(name)
