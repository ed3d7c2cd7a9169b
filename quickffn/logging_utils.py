"""Logger configuration for QuickFFN command line tools."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "QUICKFFN_LOG_LEVEL"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(level: str | int | None = None) -> int:
    """Return a numeric log level from ``level`` or ``$QUICKFFN_LOG_LEVEL``."""

    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    return numeric


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a single stream handler to the ``quickffn`` logger."""

    logger = logging.getLogger("quickffn")
    logger.setLevel(resolve_level(level))
    if not any(getattr(h, "_quickffn", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._quickffn = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "resolve_level"]
