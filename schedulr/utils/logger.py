# File: schedulr/utils/logger.py
"""
Centralized logging configuration for Schedulr.

Every module logs through ``setup_logger``. Console output goes to stdout;
a daily file under the logs directory gets the detailed format. The logs
directory is resolved here, and ``Config.LOGS_DIR`` reuses it.

Environment:
    SCHEDULR_LOG_LEVEL    console level name (default INFO)
    SCHEDULR_LOG_TO_FILE  "false" disables the daily file
    SCHEDULR_LOGS_DIR     overrides <project>/logs
"""

import logging
import os
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional

PROJECT_ROOT = Path(__file__).parent.parent.parent  # Go up 3 levels from schedulr/utils/

CONSOLE_FORMAT = logging.Formatter(
    '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
    datefmt='%H:%M:%S'
)
FILE_FORMAT = logging.Formatter(
    '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)


def logs_dir() -> Path:
    """Directory for the daily log files."""
    override = os.getenv("SCHEDULR_LOGS_DIR", "").strip()
    return Path(override) if override else PROJECT_ROOT / "logs"


def _file_logging_enabled() -> bool:
    return os.getenv("SCHEDULR_LOG_TO_FILE", "true").strip().lower() in ("1", "true", "yes", "on")


def _console_level(default: int) -> int:
    raw = os.getenv("SCHEDULR_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(raw) if raw else default
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else default


def _daily_file_handler(directory: Path) -> logging.FileHandler:
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"schedulr_{datetime.now().strftime('%Y%m%d')}.log"
    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(FILE_FORMAT)
    return handler


def setup_logger(name: str = "schedulr", level: Optional[int] = None) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name
        level: Console level; SCHEDULR_LOG_LEVEL, then INFO, when omitted

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level if level is not None else _console_level(logging.INFO))
    console_handler.setFormatter(CONSOLE_FORMAT)
    logger.addHandler(console_handler)

    if _file_logging_enabled():
        logger.addHandler(_daily_file_handler(logs_dir()))

    return logger


class LoggerMixin:
    """Mixin to add logging capability to any class."""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class."""
        if not hasattr(self, '_logger'):
            self._logger = setup_logger(self.__class__.__name__)
        return self._logger
