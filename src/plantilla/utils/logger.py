"""Minimal logging utilities for Plantilla.

Example:
    >>> from plantilla.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Rendering page")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under "plantilla.".

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("site").name
        'plantilla.site'
    """
    if not (name == "plantilla" or name.startswith("plantilla.")):
        name = f"plantilla.{name}"
    return logging.getLogger(name)
