# File: schedulr/core/config_manager.py
"""
Centralized configuration management for Schedulr.
Loads settings from environment variables (and a local .env file).
"""

import os
from typing import List, Optional, Tuple

import pytz
from dotenv import load_dotenv

from schedulr.utils.logger import PROJECT_ROOT, logs_dir, setup_logger

ENV_FILE = PROJECT_ROOT / ".env"

# Load environment variables
load_dotenv(ENV_FILE)

logger = setup_logger(__name__)


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{key}={raw!r} is not an integer, using {default}")
        return default


def parse_hour_range(raw: Optional[str]) -> Optional[Tuple[int, int]]:
    """Parse an "8-21" style hour range. Returns None for empty input."""
    if not raw or not raw.strip():
        return None
    parts = raw.split('-')
    if len(parts) != 2:
        raise ValueError(f"Hour range must look like '8-21', got {raw!r}")
    first, last = int(parts[0].strip()), int(parts[1].strip())
    if not (0 <= first < last <= 24):
        raise ValueError(f"Hour range must satisfy 0 <= first < last <= 24, got {raw!r}")
    return first, last


class Config:
    """Application configuration singleton."""

    # Base directories (shared with the logger)
    BASE_DIR = PROJECT_ROOT
    LOGS_DIR = logs_dir()
    ENV_FILE = ENV_FILE

    # Display timezone for alternative-slot labels and day windows
    TARGET_TIMEZONE = os.getenv("SCHEDULR_TIMEZONE", "UTC")

    # Conflict detection
    DEFAULT_DURATION_MINUTES = _env_int("SCHEDULR_DEFAULT_DURATION_MINUTES", 60)
    SEARCH_BEFORE_MINUTES = _env_int("SCHEDULR_SEARCH_BEFORE_MINUTES", 60)
    SEARCH_AFTER_MINUTES = _env_int("SCHEDULR_SEARCH_AFTER_MINUTES", 240)
    SLOT_STEP_MINUTES = _env_int("SCHEDULR_SLOT_STEP_MINUTES", 30)
    MAX_ALTERNATIVES = _env_int("SCHEDULR_MAX_ALTERNATIVES", 3)
    REASONABLE_HOURS_RAW = os.getenv("SCHEDULR_REASONABLE_HOURS", "")

    # Event store
    STORE_LOOKBACK_HOURS = _env_int("SCHEDULR_STORE_LOOKBACK_HOURS", 24)

    @classmethod
    def reasonable_hours(cls) -> Optional[Tuple[int, int]]:
        """Hours of day alternatives may start in, or None when unrestricted."""
        try:
            return parse_hour_range(cls.REASONABLE_HOURS_RAW)
        except ValueError as e:
            logger.warning(f"Ignoring SCHEDULR_REASONABLE_HOURS: {e}")
            return None

    @classmethod
    def validate(cls) -> bool:
        """Validate that all configuration values are usable."""
        errors: List[str] = []

        if cls.TARGET_TIMEZONE not in pytz.all_timezones_set:
            errors.append(f"Unknown timezone: {cls.TARGET_TIMEZONE}")

        positive = {
            "SCHEDULR_DEFAULT_DURATION_MINUTES": cls.DEFAULT_DURATION_MINUTES,
            "SCHEDULR_SLOT_STEP_MINUTES": cls.SLOT_STEP_MINUTES,
            "SCHEDULR_MAX_ALTERNATIVES": cls.MAX_ALTERNATIVES,
        }
        for key, value in positive.items():
            if value <= 0:
                errors.append(f"{key} must be positive (got {value})")

        non_negative = {
            "SCHEDULR_SEARCH_BEFORE_MINUTES": cls.SEARCH_BEFORE_MINUTES,
            "SCHEDULR_SEARCH_AFTER_MINUTES": cls.SEARCH_AFTER_MINUTES,
            "SCHEDULR_STORE_LOOKBACK_HOURS": cls.STORE_LOOKBACK_HOURS,
        }
        for key, value in non_negative.items():
            if value < 0:
                errors.append(f"{key} cannot be negative (got {value})")

        # The store fetch must reach back past every earlier candidate slot
        min_lookback_minutes = cls.SEARCH_BEFORE_MINUTES + cls.DEFAULT_DURATION_MINUTES
        if cls.STORE_LOOKBACK_HOURS * 60 < min_lookback_minutes:
            errors.append(
                f"SCHEDULR_STORE_LOOKBACK_HOURS must cover at least {min_lookback_minutes} "
                f"minutes (got {cls.STORE_LOOKBACK_HOURS}h)"
            )

        try:
            parse_hour_range(cls.REASONABLE_HOURS_RAW)
        except ValueError as e:
            errors.append(str(e))

        if errors:
            for error in errors:
                logger.error(f"Configuration Error: {error}")
            return False

        return True
