"""
Logging helpers for oneio.

The library never installs handlers on its own; applications configure the
``oneio`` logger (or call :func:`setup_basic_logging`) to see its output.

Usage:
    from oneio.core.log import get_logger

    logger = get_logger(__name__)
    logger.debug("cache hit for %s", path)
"""

from __future__ import annotations
import logging

DEFAULT_FORMAT = "%(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER = "oneio"


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the ``oneio`` namespace."""
    if not name.startswith(ROOT_LOGGER):
        name = ROOT_LOGGER if name == "__main__" else f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_basic_logging(level: int = logging.INFO, fmt: str | None = None) -> None:
    """Attach a single stderr handler to the ``oneio`` logger."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    # Re-running must not stack handlers
    for handler in logger.handlers[:]:
        if getattr(handler, "_oneio_default", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler._oneio_default = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
