"""Logging setup shared by every module of **A11y Page Checker**.

All modules write to one named logger::

    from a11y_page_checker.logger import logger
    logger.info("Crawling sitemap %s", url)

Records go to *stderr*, because stdout belongs to the results table and
``config`` JSON, and optionally to a size-rotated log file. The CLI calls
:func:`init_logging` once with the user's ``--log-*`` options.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

LOGGER_NAME: Final[str] = "A11yPageChecker"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

#: rotate the log file at 5 MiB, keep three old files
_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3

Level = Union[int, str]


def _console_handler(formatter: logging.Formatter) -> logging.Handler:
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    return console


def _rotating_handler(path: Union[str, Path], formatter: logging.Formatter) -> logging.Handler:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    rotating = RotatingFileHandler(
        target, maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
    )
    rotating.setFormatter(formatter)
    return rotating


def configure(
    *,
    level: Level = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set level, format and destinations of the project logger and return it.

    With ``replace_handlers=False`` the new handlers are added next to the
    existing ones (useful in tests that attach a capturing handler).
    """
    project_logger = logging.getLogger(LOGGER_NAME)
    project_logger.setLevel(level.upper() if isinstance(level, str) else level)

    if replace_handlers:
        for old in project_logger.handlers[:]:
            project_logger.removeHandler(old)
            old.close()

    formatter = logging.Formatter(log_format)
    project_logger.addHandler(_console_handler(formatter))
    if log_file:
        project_logger.addHandler(_rotating_handler(log_file, formatter))

    # keep records out of the root logger (pytest, host applications)
    project_logger.propagate = False
    return project_logger


def init_logging(
    level: Level = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """CLI entry: configure from scratch, dropping handlers of earlier calls."""
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT", "LEVELS"]
