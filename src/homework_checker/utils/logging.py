"""Logging utilities for the homework checker."""

import gzip
import logging
import os
import shutil
import sys
from datetime import date
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .files import ensure_dir

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_LOG_DIR = Path("log")
LOG_FILE_PREFIX = "hsck"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_ARCHIVES = 5


def parse_level(name: str) -> int:
    """Map a configured level name to a logging level, INFO if unknown."""
    return LEVELS.get(name.lower(), logging.INFO)


def _gzip_namer(default_name: str) -> str:
    return default_name + ".gz"


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as f_in, gzip.open(dest, "wb") as f_out:
        shutil.copyfileobj(f_in, f_out)
    os.remove(source)


def daily_log_file(log_dir: Path, day: date | None = None) -> Path:
    """Path of the log file for a calendar day."""
    day = day or date.today()
    return log_dir / f"{LOG_FILE_PREFIX}-{day:%Y-%m-%d}.log"


def setup_logging(
    level: str = "info",
    console_output: bool = False,
    log_dir: Path | None = DEFAULT_LOG_DIR,
    format_string: str | None = None,
) -> None:
    """Configure logging for the application.

    Writes to one file per calendar day, rotated at 10 MiB with up to
    five gzip archives kept.

    Args:
        level: Level name (error, warn, info, debug, trace)
        console_output: Also log to stdout
        log_dir: Directory for log files, or None to disable file logging
        format_string: Custom format string for log messages
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    handlers: list[logging.Handler] = []

    if console_output:
        handlers.append(logging.StreamHandler(sys.stdout))

    if log_dir is not None:
        ensure_dir(Path(log_dir))
        file_handler = RotatingFileHandler(
            daily_log_file(Path(log_dir)),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_ARCHIVES,
            encoding="utf-8",
        )
        file_handler.namer = _gzip_namer
        file_handler.rotator = _gzip_rotator
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=parse_level(level),
        format=format_string,
        handlers=handlers,
        force=True,
    )
    get_logger(__name__).info(
        f"Logging initialized, level: {level}, console output: {console_output}"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
