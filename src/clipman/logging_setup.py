"""
Logging setup for clipman.

- Logs to console (stderr) and to a rotating file under the XDG state dir.
- Default level: INFO. Override via environment variable CLIPMAN_LOG_LEVEL.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .platform import xdg_state_dir


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(log_dir: Optional[Path] = None) -> logging.Logger:
    level_name = os.environ.get("CLIPMAN_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    log_dir = log_dir or xdg_state_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "clipman.log"

    # module loggers (clipman.controller, clipman.clipboard, ...) propagate here
    logger = logging.getLogger("clipman")
    logger.setLevel(level)
    logger.propagate = False

    # idempotent setup
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    fmt = logging.Formatter(LOG_FORMAT)

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    logger.debug("Logging initialized at level %s", level_name)
    logger.info("Log file: %s", str(log_file))
    return logger
