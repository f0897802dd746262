"""
Logging setup for dotnetrunner.

All modules log through children of the ``dotnetrunner`` logger; entrypoints
call ``setup_logging`` once to attach handlers.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "dotnetrunner"


def setup_logging(verbose: bool = False, logfile: Path | None = None) -> logging.Logger:
    """
    Configure the ``dotnetrunner`` logger and return it.

    A RichHandler writes to stderr, keeping stdout for tool output. When
    ``logfile`` is given a plain FileHandler is added as well. Level is DEBUG
    when ``verbose`` is set, INFO otherwise. Calling it again replaces the
    previous handlers.
    """
    level = logging.DEBUG if verbose else logging.INFO
    log = logging.getLogger(ROOT_LOGGER)
    log.setLevel(level)
    log.propagate = False

    if log.hasHandlers():
        log.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        log_time_format="[%X]",
    )
    console_handler.setLevel(level)
    log.addHandler(console_handler)

    if logfile:
        logfile = Path(logfile)
        logfile.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(logfile)
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        log.addHandler(file_handler)
        log.debug("File logging enabled at: %s", logfile)

    return log


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
