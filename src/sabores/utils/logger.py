"""Minimal logging utilities for Sabores.

Sabores never configures handlers. Applications decide where records go;
the library only namespaces its loggers under ``sabores.``.

Example:
    >>> from sabores.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("declined zero-length claim")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger under the ``sabores`` namespace

    Example:
        >>> get_logger("chain").name
        'sabores.chain'
    """
    if not (name == "sabores" or name.startswith("sabores.")):
        name = f"sabores.{name}"
    return logging.getLogger(name)
