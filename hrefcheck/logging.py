"""Logger hierarchy and console output for hrefcheck.

Library modules only ever call :func:`get_logger`; handlers are installed by
the CLI and the API server through :func:`configure_logging`.
"""

from __future__ import annotations

import logging

ROOT = "hrefcheck"
_FORMAT = "[hrefcheck] %(levelname)s %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """``get_logger("links.stream")`` -> the ``hrefcheck.links.stream`` logger."""
    return logging.getLogger(f"{ROOT}.{name}" if name else ROOT)


def _resolve_level(verbose: bool, level: str | None) -> int:
    if verbose:
        return logging.DEBUG
    resolved = logging.getLevelName((level or "WARNING").upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def configure_logging(*, verbose: bool = False, level: str | None = None) -> logging.Logger:
    """Send hrefcheck records to stderr at *level* (``DEBUG`` when *verbose*).

    Repeated calls replace the previous console handler instead of adding one.
    """
    logger = logging.getLogger(ROOT)
    logger.setLevel(_resolve_level(verbose, level))
    logger.propagate = False

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.handlers[:] = [handler]
    return logger


__all__ = ["configure_logging", "get_logger"]
