# File: schedulr/services/event_store.py
"""
Event store boundary.

The real store (managed Postgres behind the hosted backend) lives outside
this package. ``EventStore`` is the read-only contract the conflict checker
needs from it; ``InMemoryEventStore`` backs the CLI and tests.
"""

import datetime
import json
from abc import ABC, abstractmethod
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List

from schedulr.utils.logger import setup_logger
from schedulr.models import (
    Event,
    ValidationError,
    event_from_scheduled_row,
    event_from_synced_row,
)

logger = setup_logger(__name__)


class EventStoreError(Exception):
    """The event store could not return events (timeout, connectivity, bad data)."""


class EventStore(ABC):
    """Read-only access to a user's scheduled events."""

    @abstractmethod
    def get_events(
        self,
        user_id: str,
        window_start: datetime.datetime,
        window_end: datetime.datetime,
    ) -> List[Event]:
        """
        Return the user's events whose start lies in [window_start, window_end].

        Raises:
            EventStoreError: If events cannot be retrieved
        """


class InMemoryEventStore(EventStore):
    """Event store held in a dict of user id to events."""

    def __init__(self, events_by_user: Dict[str, Iterable[Event]] = None):
        self._events: Dict[str, List[Event]] = defaultdict(list)
        for user_id, events in (events_by_user or {}).items():
            for event in events:
                self.add_event(user_id, event)

    def add_event(self, user_id: str, event: Event) -> None:
        """Add an event for a user."""
        self._events[user_id].append(event)

    def get_events(self, user_id, window_start, window_end) -> List[Event]:
        events = [
            event for event in self._events.get(user_id, [])
            if window_start <= event.start_time <= window_end
        ]
        events.sort(key=lambda e: e.start_time)
        logger.debug(f"Store returned {len(events)} event(s) for user {user_id}")
        return events

    @classmethod
    def from_file(cls, filepath: Path) -> 'InMemoryEventStore':
        """
        Load a store from JSON shaped like the backend tables:

            {"<user_id>": {"scheduled_events": [...], "synced_events": [...]}}
        """
        filepath = Path(filepath)
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise EventStoreError(f"Could not read events file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise EventStoreError(f"Events file {filepath} must contain a JSON object")

        store = cls()
        for user_id, tables in data.items():
            tables = tables or {}
            try:
                for row in tables.get('scheduled_events', []):
                    store.add_event(user_id, event_from_scheduled_row(row))
                for row in tables.get('synced_events', []):
                    store.add_event(user_id, event_from_synced_row(row))
            except (ValidationError, AttributeError) as e:
                raise EventStoreError(f"Invalid event row for user {user_id}: {e}") from e

        logger.info(f"Loaded events for {len(data)} user(s) from {filepath}")
        return store
