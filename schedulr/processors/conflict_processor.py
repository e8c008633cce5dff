# File: schedulr/processors/conflict_processor.py
"""
Conflict detection for proposed calendar events.

Decides whether a proposed time overlaps any of the user's existing
commitments and, if it does, offers nearby free alternatives. Pure
computation over the supplied events: no I/O, no shared state.
"""

import datetime
from typing import Callable, List, Optional, Sequence, Tuple

import pytz

from schedulr.core.config_manager import Config
from schedulr.utils.logger import setup_logger
from schedulr.models import (
    AlternativeSlot,
    ConflictingEvent,
    ConflictQuery,
    ConflictResult,
    Event,
    ValidationError,
    require_instant,
)

logger = setup_logger(__name__)

Interval = Tuple[datetime.datetime, datetime.datetime]


def intervals_overlap(a_start, a_end, b_start, b_end) -> bool:
    """Half-open intervals intersect with non-zero measure."""
    return a_start < b_end and a_end > b_start


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def format_time_of_day(moment: datetime.datetime) -> str:
    """'2:30 PM' style label, independent of platform strftime quirks."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def format_offset(offset_minutes: int) -> str:
    """'30 min later', '1 hr earlier', '1 hr 30 min later'."""
    hours, minutes = divmod(abs(offset_minutes), 60)
    parts = []
    if hours:
        parts.append(f"{hours} hr")
    if minutes:
        parts.append(f"{minutes} min")
    direction = "later" if offset_minutes > 0 else "earlier"
    return f"{' '.join(parts)} {direction}"


class ConflictResolver:
    """Detects scheduling conflicts and proposes alternative slots."""

    def __init__(
        self,
        default_duration_minutes: int = Config.DEFAULT_DURATION_MINUTES,
        search_before_minutes: int = Config.SEARCH_BEFORE_MINUTES,
        search_after_minutes: int = Config.SEARCH_AFTER_MINUTES,
        step_minutes: int = Config.SLOT_STEP_MINUTES,
        max_alternatives: int = Config.MAX_ALTERNATIVES,
        timezone: str = Config.TARGET_TIMEZONE,
        reasonable_hours: Optional[Tuple[int, int]] = None,
        clock: Callable[[], datetime.datetime] = utc_now,
    ):
        """
        Initialize the resolver.

        Args:
            default_duration_minutes: Duration assumed for events without one
            search_before_minutes: How far before the proposal to look
            search_after_minutes: How far after the proposal to look
            step_minutes: Spacing between candidate starts
            max_alternatives: Most alternatives returned
            timezone: Display timezone for slot labels (e.g., 'Europe/Amsterdam')
            reasonable_hours: Optional (first_hour, last_hour) local window
                alternatives must start in
            clock: Source of "now" when a query doesn't pin one
        """
        if default_duration_minutes <= 0:
            raise ValidationError("default_duration_minutes", "must be positive")
        if step_minutes <= 0:
            raise ValidationError("step_minutes", "must be positive")
        if max_alternatives <= 0:
            raise ValidationError("max_alternatives", "must be positive")
        if search_before_minutes < 0 or search_after_minutes < 0:
            raise ValidationError("search_window", "cannot be negative")
        if reasonable_hours is not None:
            first, last = reasonable_hours
            if not (0 <= first < last <= 24):
                raise ValidationError("reasonable_hours", f"invalid hour range {reasonable_hours}")

        try:
            self.timezone = pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError:
            raise ValidationError("timezone", f"unknown timezone: {timezone}")

        self.default_duration_minutes = default_duration_minutes
        self.search_before_minutes = search_before_minutes
        self.search_after_minutes = search_after_minutes
        self.step_minutes = step_minutes
        self.max_alternatives = max_alternatives
        self.reasonable_hours = reasonable_hours
        self.clock = clock

    @classmethod
    def from_config(cls) -> 'ConflictResolver':
        """Build a resolver from the environment-backed configuration."""
        return cls(reasonable_hours=Config.reasonable_hours())

    # ------------------------------------------------------------------

    def _blocking_intervals(self, query: ConflictQuery) -> List[Tuple[Event, Interval]]:
        """Events that can conflict, paired with their effective intervals."""
        blocking = []
        for event in query.candidate_events:
            if not event.blocks_time():
                continue
            if query.exclude_event_id is not None and event.id == query.exclude_event_id:
                continue
            interval = (event.start_time, event.end_time(self.default_duration_minutes))
            blocking.append((event, interval))
        return blocking

    def _proposed_duration(self, query: ConflictQuery) -> datetime.timedelta:
        minutes = query.proposed_duration_minutes
        if minutes is None:
            minutes = self.default_duration_minutes
        return datetime.timedelta(minutes=minutes)

    def _candidate_offsets(self) -> List[int]:
        """
        Signed minute offsets to try, closest first.
        At equal distance the later slot wins.
        """
        steps_before = self.search_before_minutes // self.step_minutes
        steps_after = self.search_after_minutes // self.step_minutes
        offsets = [
            k * self.step_minutes
            for k in range(-steps_before, steps_after + 1)
            if k != 0
        ]
        return sorted(offsets, key=lambda m: (abs(m), -m))

    def _within_reasonable_hours(self, local_start: datetime.datetime) -> bool:
        if self.reasonable_hours is None:
            return True
        first, last = self.reasonable_hours
        return first <= local_start.hour < last

    def _label(self, start: datetime.datetime, proposed_start: datetime.datetime) -> str:
        local_start = start.astimezone(self.timezone)
        label = format_time_of_day(local_start)
        if local_start.date() != proposed_start.astimezone(self.timezone).date():
            label += f" ({local_start.strftime('%a')})"
        return label

    # ------------------------------------------------------------------

    def detect_conflicts(self, query: ConflictQuery) -> ConflictResult:
        """
        Check a proposed event time against existing events.

        Args:
            query: Proposal plus the events to check against

        Returns:
            ConflictResult with overlapping events and, on conflict, alternatives

        Raises:
            ValidationError: If the query is malformed
        """
        if not isinstance(query, ConflictQuery):
            raise ValidationError("query", f"expected ConflictQuery, got {type(query).__name__}")

        proposed_start = query.proposed_start
        proposed_end = proposed_start + self._proposed_duration(query)

        conflicts = [
            ConflictingEvent.from_event(event, self.default_duration_minutes)
            for event, (start, end) in self._blocking_intervals(query)
            if intervals_overlap(proposed_start, proposed_end, start, end)
        ]

        if not conflicts:
            logger.debug(f"No conflicts for {proposed_start.isoformat()}")
            return ConflictResult(has_conflict=False)

        alternatives = self.find_alternative_slots(query, conflicts)
        logger.debug(
            f"{len(conflicts)} conflict(s) for {proposed_start.isoformat()}, "
            f"{len(alternatives)} alternative(s)"
        )
        return ConflictResult(
            has_conflict=True,
            conflicting_events=conflicts,
            alternative_slots=alternatives,
        )

    def find_alternative_slots(
        self,
        query: ConflictQuery,
        conflicts: Sequence[ConflictingEvent] = (),
    ) -> List[AlternativeSlot]:
        """
        Search nearby for free windows of the proposed length.

        Candidates are checked against every blocking event in the query,
        not only the ones in ``conflicts``. Returns an empty list when
        nothing nearby is free; the window is never widened.
        """
        duration = self._proposed_duration(query)
        blocking = [interval for _, interval in self._blocking_intervals(query)]
        # an injected clock must still yield an aware instant
        now = query.now if query.now is not None else require_instant(self.clock(), "now")
        logger.debug(f"Searching alternatives for {len(conflicts)} conflict(s)")

        alternatives: List[AlternativeSlot] = []
        for offset in self._candidate_offsets():
            candidate_start = query.proposed_start + datetime.timedelta(minutes=offset)
            candidate_end = candidate_start + duration

            # No suggestions in the past
            if candidate_start < now:
                continue

            if not self._within_reasonable_hours(candidate_start.astimezone(self.timezone)):
                continue

            if any(intervals_overlap(candidate_start, candidate_end, start, end)
                   for start, end in blocking):
                continue

            alternatives.append(AlternativeSlot(
                start=candidate_start,
                end=candidate_end,
                label=self._label(candidate_start, query.proposed_start),
                relative_label=format_offset(offset),
                offset_minutes=offset,
            ))

            if len(alternatives) >= self.max_alternatives:
                break

        return alternatives


def detect_conflicts(query: ConflictQuery, **resolver_kwargs) -> ConflictResult:
    """Convenience wrapper: build a resolver and run one check."""
    return ConflictResolver(**resolver_kwargs).detect_conflicts(query)
