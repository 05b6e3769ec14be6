"""Route the ``notesmith`` logger hierarchy to a rotating log file."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..services.settings import NoteSettings

__all__ = ["LOG_FILE_NAME", "setup_logging"]

LOG_FILE_NAME = "notesmith.log"
_PACKAGE_LOGGER = "notesmith"
_DEFAULT_LOG_DIR = Path.home() / ".notesmith" / "logs"
_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_MAX_BYTES = 1_000_000
_BACKUP_COUNT = 3


def setup_logging(settings: NoteSettings, *, debug: bool = False, console: bool = True) -> Path:
    """Attach fresh handlers to the package logger and return the log file path.

    The level is DEBUG when ``debug`` or ``settings.debug_logging`` is set. The
    log directory comes from ``settings.log_dir``. Calling this again replaces
    the handlers from the previous call. Records do not propagate to the root
    logger, so a host application's own logging setup is left alone.
    """

    level = logging.DEBUG if debug or settings.debug_logging else logging.INFO
    log_dir = Path(settings.log_dir).expanduser() if settings.log_dir else _DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME

    logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    logger.debug("Logging to %s (level=%s)", log_path, logging.getLevelName(level))
    return log_path
