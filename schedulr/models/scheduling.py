# File: schedulr/models/scheduling.py
"""
Data models for open-slot suggestions on a given day.
"""

from dataclasses import dataclass
from datetime import datetime

from .common import parse_bool
from .errors import ValidationError


@dataclass(frozen=True)
class SchedulingPreferences:
    """How a user likes their day laid out."""
    preferred_start_hour: int = 9
    preferred_end_hour: int = 18
    prefer_morning: bool = False
    prefer_afternoon: bool = False
    avoid_back_to_back: bool = True
    min_gap_minutes: int = 30

    def __post_init__(self):
        if not (0 <= self.preferred_start_hour <= 24 and 0 <= self.preferred_end_hour <= 24):
            raise ValidationError("preferred_start_hour", "hours must be between 0 and 24")
        if self.preferred_start_hour >= self.preferred_end_hour:
            raise ValidationError("preferred_end_hour", "must be after preferred_start_hour")
        if self.min_gap_minutes < 0:
            raise ValidationError("min_gap_minutes", "cannot be negative")

    @classmethod
    def from_dict(cls, data: dict) -> 'SchedulingPreferences':
        """Create preferences from a partial dictionary, defaulting the rest."""
        defaults = cls()
        return cls(
            preferred_start_hour=int(data.get('preferred_start_hour', defaults.preferred_start_hour)),
            preferred_end_hour=int(data.get('preferred_end_hour', defaults.preferred_end_hour)),
            prefer_morning=parse_bool(data.get('prefer_morning'), defaults.prefer_morning),
            prefer_afternoon=parse_bool(data.get('prefer_afternoon'), defaults.prefer_afternoon),
            avoid_back_to_back=parse_bool(data.get('avoid_back_to_back'), defaults.avoid_back_to_back),
            # a zero gap falls back to the default, as an unset gap does
            min_gap_minutes=int(data.get('min_gap_minutes') or defaults.min_gap_minutes),
        )


@dataclass(frozen=True)
class TimeSlotSuggestion:
    """A free slot on the target day with its preference score."""
    start: datetime
    end: datetime
    score: int
    reason: str

    def to_dict(self) -> dict:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'score': self.score,
            'reason': self.reason,
        }
