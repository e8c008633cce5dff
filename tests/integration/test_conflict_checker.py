# File: tests/integration/test_conflict_checker.py
"""
Integration tests for the conflict check pipeline.
Tests store -> checker -> resolver, plus the command-line entry point.
"""

import importlib.util
import json
import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import Mock

from schedulr.core.conflict_checker import ConflictChecker
from schedulr.models import Event, EventSource, ValidationError
from schedulr.processors.conflict_processor import ConflictResolver
from schedulr.services.event_store import EventStore, EventStoreError, InMemoryEventStore

_CHECK_PATH = Path(__file__).parent.parent.parent / "scripts" / "check.py"
_spec = importlib.util.spec_from_file_location("check_script", _CHECK_PATH)
check_cli = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(check_cli)


def at(hour: int, minute: int = 0, day: int = 1) -> datetime:
    return datetime(2024, 6, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def utc_resolver():
    return ConflictResolver(timezone="UTC")


class TestInMemoryEventStore:

    def test_window_filtering(self, memory_store):
        events = memory_store.get_events("user_1", at(15), at(17))
        assert [e.id for e in events] == ["sync_1"]

    def test_unknown_user_has_no_events(self, memory_store):
        assert memory_store.get_events("nobody", at(0), at(23)) == []

    def test_from_file(self, events_file):
        store = InMemoryEventStore.from_file(events_file)

        events = store.get_events("user_1", at(0), at(23))

        assert [e.id for e in events] == ["s1", "s2", "g2", "g1"]
        dentist = next(e for e in events if e.id == "g1")
        assert dentist.source == EventSource.SYNCED
        assert dentist.duration_minutes == 45

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(EventStoreError, match="Could not read"):
            InMemoryEventStore.from_file(tmp_path / "missing.json")

    def test_from_file_bad_row(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({
            "user_1": {"scheduled_events": [{"id": "s1", "event_date": "whenever"}]}
        }), encoding="utf-8")

        with pytest.raises(EventStoreError, match="Invalid event row"):
            InMemoryEventStore.from_file(path)


class TestConflictChecker:
    """Tests for ConflictChecker.check."""

    def test_conflict_found_through_store(self, memory_store, utc_resolver):
        checker = ConflictChecker(memory_store, utc_resolver)

        result = checker.check("user_1", at(14, 30), 60, now=at(0))

        assert result.has_conflict is True
        assert [c.id for c in result.conflicting_events] == ["evt_1"]
        # 15:00-16:00 ends as the dentist visit begins
        assert result.alternative_slots[0].start == at(15)

    def test_free_time(self, memory_store, utc_resolver):
        checker = ConflictChecker(memory_store, utc_resolver)

        result = checker.check("user_1", at(10), now=at(0))

        assert result.has_conflict is False

    def test_default_duration_from_resolver(self, memory_store):
        resolver = ConflictResolver(timezone="UTC", default_duration_minutes=30)
        checker = ConflictChecker(memory_store, resolver)

        # 13:30 + 30 min ends exactly when the meeting starts
        assert checker.check("user_1", at(13, 30), now=at(0)).has_conflict is False

    def test_exclude_event_when_rescheduling(self, memory_store, utc_resolver):
        checker = ConflictChecker(memory_store, utc_resolver)

        result = checker.check("user_1", at(14, 30), exclude_event_id="evt_1", now=at(0))

        assert result.has_conflict is False

    def test_long_event_started_earlier_is_seen(self, utc_resolver):
        offsite = Event(id="off", title="Offsite", start_time=at(8), duration_minutes=8 * 60)
        store = InMemoryEventStore({"user_1": [offsite]})
        checker = ConflictChecker(store, utc_resolver)

        result = checker.check("user_1", at(14), now=at(0))

        assert result.has_conflict is True

    def test_store_queried_with_window(self, utc_resolver):
        store = Mock(spec=EventStore)
        store.get_events.return_value = []
        checker = ConflictChecker(store, utc_resolver, lookback_hours=24)

        checker.check("user_1", at(14), 60, now=at(0))

        store.get_events.assert_called_once_with(
            "user_1", at(14) - timedelta(hours=24), at(14) + timedelta(minutes=240 + 60)
        )

    def test_zero_lookback_still_sees_overlapping_event(self, memory_store, utc_resolver):
        """The meeting began before the proposal but still overlaps it."""
        checker = ConflictChecker(memory_store, utc_resolver, lookback_hours=0)

        result = checker.check("user_1", at(14, 30), 60, now=at(0))

        assert checker.lookback == timedelta(minutes=60 + 60)
        assert result.has_conflict is True
        assert [c.id for c in result.conflicting_events] == ["evt_1"]

    def test_short_lookback_covers_backward_search(self):
        lunch = Event(id="lunch", title="Lunch", start_time=at(13))
        block = Event(id="block", title="Workshop", start_time=at(14, 30), duration_minutes=240)
        store = InMemoryEventStore({"user_1": [lunch, block]})
        resolver = ConflictResolver(timezone="UTC", search_before_minutes=180)
        checker = ConflictChecker(store, resolver, lookback_hours=1)

        result = checker.check("user_1", at(14, 30), 60, now=at(0))

        starts = [slot.start for slot in result.alternative_slots]
        assert starts == [at(12), at(11, 30), at(18, 30)]
        assert not any(slot.start < at(14) and slot.end > at(13) for slot in result.alternative_slots)

    def test_store_failure_is_raised(self, failing_store, utc_resolver):
        checker = ConflictChecker(failing_store, utc_resolver)

        with pytest.raises(EventStoreError, match="backend unreachable"):
            checker.check("user_1", at(14), now=at(0))

    def test_store_error_passes_through(self, utc_resolver):
        store = Mock(spec=EventStore)
        store.get_events.side_effect = EventStoreError("timeout")
        checker = ConflictChecker(store, utc_resolver)

        with pytest.raises(EventStoreError, match="timeout"):
            checker.check("user_1", at(14), now=at(0))

    def test_invalid_input_never_reaches_store(self, utc_resolver):
        store = Mock(spec=EventStore)
        checker = ConflictChecker(store, utc_resolver)

        with pytest.raises(ValidationError):
            checker.check("user_1", at(14), duration_minutes=-15)
        with pytest.raises(ValidationError):
            checker.check("user_1", datetime(2024, 6, 1, 14))
        with pytest.raises(ValidationError):
            checker.check("", at(14))

        store.get_events.assert_not_called()


class TestCheckScript:
    """Tests for scripts/check.py."""

    def test_conflict_exit_code(self, events_file, capsys):
        code = check_cli.main([
            str(events_file), "user_1", "2024-06-01T14:30:00Z", "--now", "2024-06-01T00:00:00Z"
        ])

        out = capsys.readouterr().out
        assert code == check_cli.EXIT_CONFLICT
        assert "Team Meeting" in out
        assert "Try instead:" in out

    def test_free_exit_code(self, events_file, capsys):
        code = check_cli.main([
            str(events_file), "user_1", "2024-06-01T10:00:00Z", "--now", "2024-06-01T00:00:00Z"
        ])

        assert code == check_cli.EXIT_FREE
        assert "This time is free." in capsys.readouterr().out

    def test_bad_start(self, events_file):
        assert check_cli.main([str(events_file), "user_1", "yesterday"]) == check_cli.EXIT_ERROR

    def test_missing_file(self, tmp_path):
        code = check_cli.main([str(tmp_path / "nope.json"), "user_1", "2024-06-01T10:00:00Z"])
        assert code == check_cli.EXIT_ERROR
