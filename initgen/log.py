"""Logging helpers.

Library modules obtain loggers through :func:`get_logger` and never install
handlers themselves.  Front ends call :func:`configure_logging` once to route
the ``initgen`` namespace through Rich.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "initgen"


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``initgen.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(level: str | int = "INFO", console: Console | None = None) -> None:
    """Attach a Rich handler to the ``initgen`` logger.

    Calling this again replaces the previously installed handler instead of
    stacking a second one.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
