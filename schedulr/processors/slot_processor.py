# File: schedulr/processors/slot_processor.py
"""
Open-slot suggestions for a single day.
Scores free slots inside the user's working hours against their preferences.
"""

import datetime
from typing import Callable, List, Optional, Sequence, Tuple

import pytz

from schedulr.core.config_manager import Config
from schedulr.utils.logger import LoggerMixin
from schedulr.models import (
    Event,
    SchedulingPreferences,
    TimeSlotSuggestion,
    ValidationError,
    require_instant,
    require_positive_minutes,
)
from schedulr.processors.conflict_processor import intervals_overlap, utc_now

SLOT_INTERVAL_MINUTES = 30
BASE_SCORE = 100


class SlotFinder(LoggerMixin):
    """Finds and ranks free slots on a target day."""

    def __init__(
        self,
        timezone: str = Config.TARGET_TIMEZONE,
        default_duration_minutes: int = Config.DEFAULT_DURATION_MINUTES,
        clock: Callable[[], datetime.datetime] = utc_now,
    ):
        try:
            self.timezone = pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError:
            raise ValidationError("timezone", f"unknown timezone: {timezone}")
        self.default_duration_minutes = default_duration_minutes
        self.clock = clock

    def _local(self, day: datetime.date, hour: int) -> datetime.datetime:
        naive = datetime.datetime.combine(day, datetime.time.min) + datetime.timedelta(hours=hour)
        return self.timezone.localize(naive)

    def _score(
        self,
        start: datetime.datetime,
        end: datetime.datetime,
        busy: List[Tuple[datetime.datetime, datetime.datetime]],
        prefs: SchedulingPreferences,
    ) -> Tuple[int, str]:
        score = BASE_SCORE
        reasons: List[str] = []
        local_start = start.astimezone(self.timezone)
        hour = local_start.hour

        if prefs.prefer_morning and 9 <= hour < 12:
            score += 20
            reasons.append("Morning slot")

        if prefs.prefer_afternoon and 13 <= hour < 17:
            score += 20
            reasons.append("Afternoon slot")

        if prefs.avoid_back_to_back:
            min_gap = datetime.timedelta(minutes=prefs.min_gap_minutes)
            zero = datetime.timedelta(0)
            too_close = any(
                (zero <= start - busy_end < min_gap) or (zero <= busy_start - end < min_gap)
                for busy_start, busy_end in busy
            )
            if too_close:
                score -= 30
                reasons.append("Close to another event")
            elif busy:
                score += 15
                reasons.append("Good buffer time")

        # Golden focus hours
        if 10 <= hour <= 11 or 14 <= hour <= 15:
            score += 10
            reasons.append("Optimal focus time")

        if local_start.minute == 0:
            score += 5
            reasons.append("Clean start time")

        if hour < 9:
            score -= 20
            reasons.append("Early morning")
        if hour >= 17:
            score -= 15
            reasons.append("Late afternoon")

        return score, reasons[0] if reasons else "Available"

    def find_best_time_slots(
        self,
        target_date: datetime.date,
        events: Sequence[Event],
        duration_minutes: int = 60,
        preferences: Optional[SchedulingPreferences] = None,
        now: Optional[datetime.datetime] = None,
        limit: int = 5,
    ) -> List[TimeSlotSuggestion]:
        """
        Rank free slots on ``target_date`` within the preferred working hours.

        Args:
            target_date: Local calendar day to search
            events: Existing events; completed and free ones are ignored
            duration_minutes: Length of the slot to place
            preferences: Scoring preferences (defaults apply when None)
            now: Reference instant; slots starting earlier are skipped
            limit: Most suggestions returned

        Returns:
            Suggestions ordered by score, best first
        """
        if isinstance(target_date, datetime.datetime) or not isinstance(target_date, datetime.date):
            raise ValidationError("target_date", "expected a date")
        require_positive_minutes(duration_minutes, "duration_minutes")
        if limit <= 0:
            raise ValidationError("limit", "must be positive")
        prefs = preferences or SchedulingPreferences()
        now = require_instant(now if now is not None else self.clock(), "now")

        busy = sorted(
            (event.start_time, event.end_time(self.default_duration_minutes))
            for event in events
            if event.blocks_time()
        )

        duration = datetime.timedelta(minutes=duration_minutes)
        step = datetime.timedelta(minutes=SLOT_INTERVAL_MINUTES)
        work_start = self._local(target_date, prefs.preferred_start_hour)
        work_end = self._local(target_date, prefs.preferred_end_hour)

        suggestions: List[TimeSlotSuggestion] = []
        current = work_start
        while current + duration <= work_end:
            slot_start, slot_end = current, current + duration
            current += step

            if slot_start < now:
                continue
            if any(intervals_overlap(slot_start, slot_end, s, e) for s, e in busy):
                continue

            score, reason = self._score(slot_start, slot_end, busy, prefs)
            suggestions.append(TimeSlotSuggestion(
                start=slot_start, end=slot_end, score=score, reason=reason
            ))

        # sort is stable: equal scores stay chronological
        suggestions.sort(key=lambda s: s.score, reverse=True)
        self.logger.debug(f"{len(suggestions)} free slot(s) on {target_date.isoformat()}")
        return suggestions[:limit]
