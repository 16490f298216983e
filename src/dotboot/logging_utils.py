"""
Logging setup.

Progress for the person watching goes through the reporter; the log file
gets every command dotboot runs and every decision a step makes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"
FALLBACK_LOG_NAME = "dotboot.log"


def configure_logging(
    log_file: Optional[Path] = None,
    verbose: bool = False,
) -> Optional[str]:
    """Configure the ``dotboot`` logger.

    Writes to ``log_file`` when possible and falls back to a file in the
    current working directory if the preferred location is not writable.
    In verbose mode debug records are echoed to stderr as well.

    Returns the actual log file path, or None when no file could be opened.
    """

    logger = logging.getLogger("dotboot")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Avoid duplicate handlers if configure_logging() is called twice.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    chosen: Optional[str] = None

    candidates = []
    if log_file is not None:
        candidates.append(Path(log_file))
    candidates.append(Path.cwd() / FALLBACK_LOG_NAME)

    for candidate in candidates:
        try:
            candidate.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(candidate, encoding="utf-8")
        except OSError:
            continue
        file_handler.setFormatter(fmt)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)
        chosen = str(candidate)
        break

    if verbose:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        console.setLevel(logging.DEBUG)
        logger.addHandler(console)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.info("Logging initialized (requested=%s, actual=%s)", log_file, chosen)
    return chosen
