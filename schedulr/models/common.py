# File: schedulr/models/common.py

from datetime import datetime
from typing import Any, Optional

from .errors import ValidationError


def parse_iso_datetime(date_str: Optional[str]) -> Optional[datetime]:
    """Robustly parse ISO date strings with 'Z' or offsets."""
    if not date_str:
        return None
    try:
        # Python < 3.11 doesn't handle 'Z' natively in fromisoformat
        clean_str = date_str.replace('Z', '+00:00')
        return datetime.fromisoformat(clean_str)
    except ValueError:
        return None


def is_aware(value: Any) -> bool:
    """True for datetimes that carry a usable UTC offset."""
    return (
        isinstance(value, datetime)
        and value.tzinfo is not None
        and value.utcoffset() is not None
    )


def parse_bool(raw: Any, default: bool) -> bool:
    """Tolerant boolean parsing for JSON rows and form data ("false" is False)."""
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in ['yes', 'true', '1', 'y', 't']


def require_instant(value: Any, field: str) -> datetime:
    """
    Coerce an ISO string or datetime into a timezone-aware instant.

    Naive datetimes are rejected rather than guessed at; callers must
    normalize local wall-clock times before they get here.
    """
    if isinstance(value, str):
        parsed = parse_iso_datetime(value)
        if parsed is None:
            raise ValidationError(field, f"not a valid ISO-8601 timestamp: {value!r}")
        value = parsed
    if not isinstance(value, datetime):
        raise ValidationError(field, f"expected a datetime, got {type(value).__name__}")
    if not is_aware(value):
        raise ValidationError(field, "timestamp must be timezone-aware")
    return value


def require_positive_minutes(value: Any, field: str) -> int:
    """Validate a positive whole number of minutes."""
    # bool is an int subclass; True minutes is never intended
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, f"expected an integer number of minutes, got {value!r}")
    if value <= 0:
        raise ValidationError(field, f"must be positive (got {value})")
    return value
