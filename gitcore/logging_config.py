"""Logging setup for the gitcore command line."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional


def setup_logging(log_level: str = "WARNING", log_file: Optional[str | Path] = None) -> logging.Logger:
    """Attach a stderr handler (and optionally a rotating file handler) to the gitcore logger.

    Calling it again replaces the handlers, so the level can be changed per invocation.
    """
    level = getattr(logging, log_level.upper())
    logger = logging.getLogger("gitcore")
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(path, maxBytes=1024 * 1024, backupCount=3)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    # keep records out of the root logger's handlers
    logger.propagate = False
    return logger
