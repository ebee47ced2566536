"""Logging configuration for rtotrack."""

import logging
from pathlib import Path

import platformdirs


def setup_logging() -> None:
    """Configure logging with file handler for debug output.

    Logs go to the platform log dir (e.g. ~/.local/state/rtotrack/log/debug.log).
    Console output is handled separately by Rich; this is for debug file logging only.
    """
    logger = logging.getLogger("rtotrack")
    logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, watch loop restarts) must not stack handlers
    if logger.handlers:
        return

    try:
        log_dir = Path(platformdirs.user_log_dir("rtotrack", ensure_exists=True))
        log_file = log_dir / "debug.log"
        fh = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        # Read-only home (sandboxed tests, containers): skip file logging
        logger.addHandler(logging.NullHandler())
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(fh)

    logger.debug("Logging initialized → %s", log_file)
