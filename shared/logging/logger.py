"""Shared logger utility.

Provides a consistent get_logger function for library code that may run
before (or without) the console's own logging setup. Auto-configures a
minimal text handler on first use if nothing else has configured logging.
"""

from __future__ import annotations

import logging

_configured = False

_MINIMAL_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str, auto_configure: bool = True) -> logging.Logger:
    """Get a logger, configuring the root logger minimally if needed.

    Args:
        name: Logger name (usually a dotted component name)
        auto_configure: Whether to auto-configure logging on first use

    Returns:
        Logger instance that propagates to the root handler
    """
    global _configured

    if auto_configure and not _configured:
        logging.basicConfig(level=logging.INFO, format=_MINIMAL_FORMAT)
        _configured = True

    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def is_configured() -> bool:
    return _configured


def mark_configured():
    """Called by shared.logging.json.configure_logging."""
    global _configured
    _configured = True


__all__ = ["get_logger", "is_configured", "mark_configured"]
