# File: schedulr/models/conflict.py
"""
Request and response models for conflict checks.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .common import require_instant, require_positive_minutes
from .enums import EventSource
from .errors import ValidationError
from .events import Event

NO_CONFLICT_MESSAGE = "This time is free."
ALTERNATIVES_MESSAGE = "This time overlaps {count} event(s). Nearby free times are available."
NO_ALTERNATIVES_MESSAGE = "This time overlaps {count} event(s). No nearby free time. Try a different day."


@dataclass(frozen=True)
class ConflictQuery:
    """A proposed event time checked against the user's existing events."""
    proposed_start: datetime
    proposed_duration_minutes: Optional[int] = None  # None: the resolver default applies
    candidate_events: Sequence[Event] = ()
    exclude_event_id: Optional[str] = None
    now: Optional[datetime] = None

    def __post_init__(self):
        """Reject malformed input before any computation happens."""
        object.__setattr__(self, 'proposed_start', require_instant(self.proposed_start, "proposed_start"))
        if self.proposed_duration_minutes is not None:
            require_positive_minutes(self.proposed_duration_minutes, "proposed_duration_minutes")
        if self.now is not None:
            object.__setattr__(self, 'now', require_instant(self.now, "now"))

        if self.candidate_events is None:
            events: Tuple[Event, ...] = ()
        else:
            events = tuple(self.candidate_events)
        for i, event in enumerate(events):
            if not isinstance(event, Event):
                raise ValidationError(
                    "candidate_events", f"expected Event, got {type(event).__name__}", entry_index=i
                )
        object.__setattr__(self, 'candidate_events', events)


@dataclass(frozen=True)
class ConflictingEvent:
    """An existing event that overlaps the proposal, kept for display."""
    id: str
    title: str
    start_time: datetime
    duration_minutes: int
    source: EventSource

    @classmethod
    def from_event(cls, event: Event, default_minutes: int) -> 'ConflictingEvent':
        return cls(
            id=event.id,
            title=event.title,
            start_time=event.start_time,
            duration_minutes=event.effective_duration(default_minutes),
            source=event.source,
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'start_time': self.start_time.isoformat(),
            'duration_minutes': self.duration_minutes,
            'source': self.source.value,
        }


@dataclass(frozen=True)
class AlternativeSlot:
    """A nearby free window offered instead of the proposal."""
    start: datetime
    end: datetime
    label: str           # "2:30 PM", or "9:00 AM (Sun)" on another day
    relative_label: str  # "30 min later", "1 hr earlier"
    offset_minutes: int  # signed distance from the proposed start

    def to_dict(self) -> dict:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'label': self.label,
            'relative_label': self.relative_label,
            'offset_minutes': self.offset_minutes,
        }


@dataclass(frozen=True)
class ConflictResult:
    """Outcome of a conflict check."""
    has_conflict: bool
    conflicting_events: List[ConflictingEvent] = field(default_factory=list)
    alternative_slots: List[AlternativeSlot] = field(default_factory=list)

    def needs_another_day(self) -> bool:
        """A conflict with nothing free nearby; the user should pick another day."""
        return self.has_conflict and not self.alternative_slots

    def summary(self) -> str:
        """User-facing message. The three outcomes never share wording."""
        if not self.has_conflict:
            return NO_CONFLICT_MESSAGE
        count = len(self.conflicting_events)
        if self.needs_another_day():
            return NO_ALTERNATIVES_MESSAGE.format(count=count)
        return ALTERNATIVES_MESSAGE.format(count=count)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'has_conflict': self.has_conflict,
            'conflicting_events': [e.to_dict() for e in self.conflicting_events],
            'alternative_slots': [s.to_dict() for s in self.alternative_slots],
            'summary': self.summary(),
        }
