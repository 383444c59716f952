"""Logging configuration for clubs.

Console output goes to stderr; an optional log file captures everything.
"""

from __future__ import annotations

import logging
import sys

from pathlib import Path

# Package logger; modules log through logging.getLogger(__name__) beneath it.
logger = logging.getLogger("clubs")


def setup_logging(
    log_file: Path | None = None,
    verbose: bool = False,
    console: bool = True,
) -> logging.Logger:
    """Set up logging for clubs.

    Args:
        log_file: If given, write DEBUG and above to this file.
        verbose: Show INFO messages on the console instead of only warnings.
        console: Set False when the terminal is owned by a full-screen UI.

    Returns:
        Configured logger.
    """
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.debug("Logging initialized. Log file: %s", log_file)
    return logger
