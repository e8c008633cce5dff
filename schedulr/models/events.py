# File: schedulr/models/events.py

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from .common import parse_bool, require_instant, require_positive_minutes
from .enums import EventSource
from .errors import ValidationError


@dataclass(frozen=True)
class Event:
    """An existing calendar commitment, as supplied by the event store."""
    id: str
    title: str
    start_time: datetime
    duration_minutes: Optional[int] = None
    is_completed: bool = False
    source: EventSource = EventSource.OWNED
    is_busy: bool = True

    def __post_init__(self):
        """Validate event data."""
        object.__setattr__(self, 'start_time', require_instant(self.start_time, "start_time"))
        if self.duration_minutes is not None:
            require_positive_minutes(self.duration_minutes, "duration_minutes")
        if isinstance(self.source, str):
            try:
                object.__setattr__(self, 'source', EventSource(self.source))
            except ValueError:
                raise ValidationError("source", f"unknown event source: {self.source!r}")

    def effective_duration(self, default_minutes: int) -> int:
        """Duration used for conflict purposes."""
        if self.duration_minutes is None:
            return default_minutes
        return self.duration_minutes

    def end_time(self, default_minutes: int) -> datetime:
        """End of the half-open interval [start_time, end_time)."""
        return self.start_time + timedelta(minutes=self.effective_duration(default_minutes))

    def blocks_time(self) -> bool:
        """Completed events and free synced events never conflict with anything."""
        return not self.is_completed and self.is_busy

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'title': self.title,
            'start_time': self.start_time.isoformat(),
            'duration_minutes': self.duration_minutes,
            'is_completed': self.is_completed,
            'source': self.source.value,
            'is_busy': self.is_busy,
        }


def _parse_minutes(raw: Any) -> Optional[int]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ValidationError("duration_minutes", f"expected minutes, got {raw!r}")
    try:
        return int(float(raw))  # Handle "30.0" strings
    except (TypeError, ValueError):
        raise ValidationError("duration_minutes", f"expected minutes, got {raw!r}")


def _require_key(data: dict, key: str) -> Any:
    if data.get(key) in (None, ""):
        raise ValidationError(key, "missing required field")
    return data[key]


def event_from_dict(data: dict) -> Event:
    """Create Event from a generic dictionary (e.g., loaded from JSON)."""
    return Event(
        id=str(_require_key(data, 'id')),
        title=str(data.get('title') or 'Untitled Event'),
        start_time=require_instant(_require_key(data, 'start_time'), 'start_time'),
        duration_minutes=_parse_minutes(data.get('duration_minutes')),
        is_completed=parse_bool(data.get('is_completed'), False),
        source=data.get('source', EventSource.OWNED.value),
        is_busy=parse_bool(data.get('is_busy'), True),
    )


def event_from_scheduled_row(row: dict) -> Event:
    """Adapt a ``scheduled_events`` row (an event the user created)."""
    return Event(
        id=str(_require_key(row, 'id')),
        title=str(row.get('title') or 'Untitled Event'),
        start_time=require_instant(_require_key(row, 'event_date'), 'event_date'),
        duration_minutes=_parse_minutes(row.get('duration_minutes')),
        is_completed=parse_bool(row.get('is_completed'), False),
        source=EventSource.OWNED,
    )


def event_from_synced_row(row: dict) -> Event:
    """
    Adapt a ``synced_events`` row mirrored from an external calendar.

    Synced rows carry an explicit end time; the duration is the span
    between start and end, rounded up to whole minutes.
    """
    start = require_instant(_require_key(row, 'start_time'), 'start_time')
    end = require_instant(_require_key(row, 'end_time'), 'end_time')
    if end <= start:
        raise ValidationError("end_time", f"must be after start_time for event {row.get('id')}")

    duration = max(1, math.ceil((end - start).total_seconds() / 60))

    return Event(
        id=str(_require_key(row, 'id')),
        title=str(row.get('title') or 'Busy'),
        start_time=start,
        duration_minutes=duration,
        is_completed=False,
        source=EventSource.SYNCED,
        is_busy=parse_bool(row.get('is_busy'), True),
    )
