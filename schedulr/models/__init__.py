from .enums import EventSource
from .errors import ValidationError
from .common import parse_bool, parse_iso_datetime, require_instant, require_positive_minutes
from .events import Event, event_from_dict, event_from_scheduled_row, event_from_synced_row
from .conflict import (
    ConflictQuery,
    ConflictingEvent,
    AlternativeSlot,
    ConflictResult,
)
from .scheduling import SchedulingPreferences, TimeSlotSuggestion

__all__ = [
    "EventSource",
    "ValidationError",
    "parse_bool",
    "parse_iso_datetime",
    "require_instant",
    "require_positive_minutes",
    "Event",
    "event_from_dict",
    "event_from_scheduled_row",
    "event_from_synced_row",
    "ConflictQuery",
    "ConflictingEvent",
    "AlternativeSlot",
    "ConflictResult",
    "SchedulingPreferences",
    "TimeSlotSuggestion",
]
