# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable test data and mocks for all tests.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import Mock

import pytest

# Keep test runs from writing daily log files
os.environ.setdefault("SCHEDULR_LOG_TO_FILE", "false")

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from schedulr.models import Event, EventSource
from schedulr.processors.conflict_processor import ConflictResolver
from schedulr.services.event_store import EventStore, InMemoryEventStore


def at(hour: int, minute: int = 0, day: int = 1) -> datetime:
    """A UTC instant on June `day`, 2024."""
    return datetime(2024, 6, day, hour, minute, tzinfo=timezone.utc)


# ==================== Clock Fixtures ====================

@pytest.fixture
def early_now():
    """A 'now' well before every test scenario."""
    return at(0, 0)


# ==================== Resolver Fixtures ====================

@pytest.fixture
def resolver():
    """Resolver with the documented defaults and UTC labels."""
    return ConflictResolver(
        default_duration_minutes=60,
        search_before_minutes=60,
        search_after_minutes=240,
        step_minutes=30,
        max_alternatives=3,
        timezone="UTC",
    )


# ==================== Event Fixtures ====================

@pytest.fixture
def team_meeting():
    """An hour-long owned event at 14:00."""
    return Event(
        id="evt_1",
        title="Team Meeting",
        start_time=at(14, 0),
        duration_minutes=60,
    )


@pytest.fixture
def completed_meeting():
    """The same slot, already done."""
    return Event(
        id="evt_done",
        title="Finished Meeting",
        start_time=at(14, 0),
        duration_minutes=60,
        is_completed=True,
    )


@pytest.fixture
def synced_dentist():
    """A busy event mirrored from an external calendar."""
    return Event(
        id="sync_1",
        title="Dentist",
        start_time=at(16, 0),
        duration_minutes=45,
        source=EventSource.SYNCED,
    )


# ==================== Store Fixtures ====================

@pytest.fixture
def memory_store(team_meeting, synced_dentist):
    """In-memory store holding one user's events."""
    return InMemoryEventStore({"user_1": [team_meeting, synced_dentist]})


@pytest.fixture
def failing_store():
    """Store whose backend connection is down."""
    store = Mock(spec=EventStore)
    store.get_events.side_effect = ConnectionError("backend unreachable")
    return store


# ==================== File Fixtures ====================

@pytest.fixture
def events_file(tmp_path):
    """JSON events file shaped like the backend tables."""
    content = """
    {
      "user_1": {
        "scheduled_events": [
          {"id": "s1", "title": "Team Meeting", "event_date": "2024-06-01T14:00:00Z", "is_completed": false},
          {"id": "s2", "title": "Old Standup", "event_date": "2024-06-01T15:00:00Z", "is_completed": true}
        ],
        "synced_events": [
          {"id": "g1", "title": "Dentist", "start_time": "2024-06-01T16:00:00+00:00",
           "end_time": "2024-06-01T16:45:00+00:00", "is_busy": true},
          {"id": "g2", "title": "Focus (free)", "start_time": "2024-06-01T15:00:00+00:00",
           "end_time": "2024-06-01T16:00:00+00:00", "is_busy": false}
        ]
      }
    }
    """
    path = tmp_path / "events.json"
    path.write_text(content, encoding="utf-8")
    return path
