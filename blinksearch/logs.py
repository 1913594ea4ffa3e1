"""File logging setup.

All modules log through ``logging.getLogger(__name__)``; only the CLI
entrypoint attaches the handler so child pipe stages stay silent.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FILENAME = "blink.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_dir: Path, level: int = logging.DEBUG) -> logging.Logger:
    """Append package logs to ``log_dir / blink.log``.

    Repeated calls reuse the existing handler instead of adding another.
    """
    logger = logging.getLogger("blinksearch")
    if not logger.handlers:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / LOG_FILENAME, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
