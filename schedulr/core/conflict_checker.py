# File: schedulr/core/conflict_checker.py
"""
Conflict checker for a user's calendar.
Gathers the user's events from the event store and hands them to the
ConflictResolver. Store failures surface to the caller; they are never
turned into a silent "no conflict".
"""

import datetime
from typing import Optional

from schedulr.core.config_manager import Config
from schedulr.utils.logger import setup_logger
from schedulr.services.event_store import EventStore, EventStoreError
from schedulr.processors.conflict_processor import ConflictResolver
from schedulr.models import ConflictQuery, ConflictResult, ValidationError, require_instant

logger = setup_logger(__name__)


class ConflictChecker:
    """Checks proposed event times against a user's stored events."""

    def __init__(
        self,
        store: EventStore,
        resolver: Optional[ConflictResolver] = None,
        lookback_hours: int = Config.STORE_LOOKBACK_HOURS,
    ):
        """
        Initialize the checker.

        Args:
            store: Source of the user's events
            resolver: Conflict resolver (built from Config when omitted)
            lookback_hours: How far before the proposal to fetch events, so
                long events that started earlier are still seen. Never less
                than the backward search plus one default-length event.
        """
        self.store = store
        self.resolver = resolver or ConflictResolver.from_config()
        # earliest candidate start, minus a default-length event ending on it
        min_reach = datetime.timedelta(
            minutes=self.resolver.search_before_minutes + self.resolver.default_duration_minutes
        )
        self.lookback = max(datetime.timedelta(hours=lookback_hours), min_reach)

    def check(
        self,
        user_id: str,
        proposed_start: datetime.datetime,
        duration_minutes: Optional[int] = None,
        exclude_event_id: Optional[str] = None,
        now: Optional[datetime.datetime] = None,
    ) -> ConflictResult:
        """
        Check one proposed event time for a user.

        Args:
            user_id: Owner of the calendar
            proposed_start: Timezone-aware start of the proposed event
            duration_minutes: Proposed length (resolver default when None)
            exclude_event_id: Event being rescheduled, ignored for conflicts
            now: Reference instant for past filtering

        Returns:
            ConflictResult from the resolver

        Raises:
            ValidationError: If the proposal is malformed
            EventStoreError: If events could not be fetched
        """
        if not user_id:
            raise ValidationError("user_id", "missing required field")
        proposed_start = require_instant(proposed_start, "proposed_start")
        if duration_minutes is None:
            duration_minutes = self.resolver.default_duration_minutes

        # Validate before touching the store
        ConflictQuery(
            proposed_start=proposed_start,
            proposed_duration_minutes=duration_minutes,
            exclude_event_id=exclude_event_id,
            now=now,
        )

        window_start = proposed_start - self.lookback
        window_end = proposed_start + datetime.timedelta(
            minutes=self.resolver.search_after_minutes + duration_minutes
        )

        try:
            events = self.store.get_events(user_id, window_start, window_end)
        except EventStoreError:
            logger.error(f"Event store failed for user {user_id}", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"Event store failed for user {user_id}: {e}", exc_info=True)
            raise EventStoreError(f"Could not fetch events for user {user_id}: {e}") from e

        logger.info(
            f"Checking {proposed_start.isoformat()} ({duration_minutes} min) "
            f"against {len(events)} event(s) for user {user_id}"
        )

        result = self.resolver.detect_conflicts(ConflictQuery(
            proposed_start=proposed_start,
            proposed_duration_minutes=duration_minutes,
            candidate_events=events,
            exclude_event_id=exclude_event_id,
            now=now,
        ))

        if result.needs_another_day():
            logger.warning(f"No nearby free time around {proposed_start.isoformat()}")
        elif result.has_conflict:
            logger.info(
                f"{len(result.conflicting_events)} conflict(s), "
                f"{len(result.alternative_slots)} alternative(s)"
            )
        return result
