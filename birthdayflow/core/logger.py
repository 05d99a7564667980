"""Logging setup for birthdayflow.

Every module logs through a child of the ``birthdayflow`` logger. ``configure_logging``
owns its handlers: one rotating ``app.log`` under the work directory and one console
handler. Calling it again with another directory moves the log file there.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

from .errors import ConfigError
from .settings import default_work_dir


ROOT_LOGGER = "birthdayflow"
LOG_FILE = "app.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
MAX_LOG_BYTES = 2 * 1024 * 1024
LOG_BACKUPS = 3

_log_path: Path | None = None


class ConsoleHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stdout`` is when a record is emitted."""

    @property
    def stream(self):
        return sys.stdout

    @stream.setter
    def stream(self, value) -> None:
        # Bound to sys.stdout; CLI runners swap it per invocation.
        pass


def parse_level(level: str | int) -> int:
    """Translate ``"debug"``/``"WARNING"``/``10`` into a logging level."""

    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ConfigError(f"Unknown log level: {level}")
    return value


def configure_logging(level: str | int | None = None, log_dir: Path | None = None) -> logging.Logger:
    """(Re)configure the package logger and return it.

    ``level=None`` keeps the current level (INFO on first use). ``log_dir=None`` keeps
    the current log file, or uses ``<work>/logs`` when nothing is configured yet.
    """

    global _log_path
    logger = logging.getLogger(ROOT_LOGGER)
    logger.propagate = False
    if level is not None:
        logger.setLevel(parse_level(level))
    elif _log_path is None:
        logger.setLevel(logging.INFO)

    if log_dir is not None:
        target = Path(log_dir) / LOG_FILE
    else:
        target = _log_path or default_work_dir() / "logs" / LOG_FILE

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    if target != _log_path:
        for handler in list(logger.handlers):
            if isinstance(handler, RotatingFileHandler):
                logger.removeHandler(handler)
                handler.close()
        target.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(target, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        _log_path = target

    if not any(isinstance(handler, ConsoleHandler) for handler in logger.handlers):
        console = ConsoleHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)
    return logger


def current_log_path() -> Path | None:
    return _log_path


def get_logger(name: str | None = None) -> logging.Logger:
    """Package logger, or its ``name`` child. Installs default handlers on first use."""

    if _log_path is None:
        configure_logging()
    logger = logging.getLogger(ROOT_LOGGER)
    return logger.getChild(name) if name else logger
