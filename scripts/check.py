"""
Conflict check entry point.
Checks a proposed event time against a user's events loaded from a JSON file
and prints any conflicts along with nearby free alternatives.

Usage:
    python scripts/check.py events.json USER_ID 2024-06-01T14:30:00+00:00 --duration 60
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from schedulr.core.config_manager import Config
from schedulr.core.conflict_checker import ConflictChecker
from schedulr.services.event_store import InMemoryEventStore, EventStoreError
from schedulr.models import ValidationError, ConflictResult, parse_iso_datetime
from schedulr.utils.logger import setup_logger

logger = setup_logger(__name__)

EXIT_FREE = 0
EXIT_ERROR = 1
EXIT_CONFLICT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check a proposed event time for conflicts.")
    parser.add_argument("events_file", type=Path, help="JSON file of scheduled/synced events per user")
    parser.add_argument("user_id", help="User whose calendar to check")
    parser.add_argument("start", help="Proposed start, ISO-8601 with offset (e.g. 2024-06-01T14:30:00Z)")
    parser.add_argument("--duration", type=int, default=None, help="Proposed duration in minutes")
    parser.add_argument("--exclude", default=None, help="Id of the event being rescheduled")
    parser.add_argument("--now", default=None, help="Reference 'now' instant, ISO-8601")
    return parser


def print_result(result: ConflictResult) -> None:
    """Print the result the way the app's conflict warning lays it out."""
    print(f"\n{result.summary()}")
    if not result.has_conflict:
        return

    print("\nConflicts:")
    for event in result.conflicting_events:
        print(
            f"  - {event.title} at {event.start_time.isoformat()} "
            f"({event.duration_minutes} min, {event.source.value})"
        )

    if result.alternative_slots:
        print("\nTry instead:")
        for slot in result.alternative_slots:
            print(f"  - {slot.label} ({slot.relative_label})")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 when free, 2 on conflict, 1 on error)
    """
    args = build_parser().parse_args(argv)

    if not Config.validate():
        logger.error("Configuration validation failed")
        return EXIT_ERROR

    start = parse_iso_datetime(args.start)
    if start is None:
        logger.error(f"Could not parse start time: {args.start}")
        return EXIT_ERROR

    now = None
    if args.now:
        now = parse_iso_datetime(args.now)
        if now is None:
            logger.error(f"Could not parse --now: {args.now}")
            return EXIT_ERROR

    try:
        store = InMemoryEventStore.from_file(args.events_file)
        checker = ConflictChecker(store)
        result = checker.check(
            args.user_id,
            start,
            duration_minutes=args.duration,
            exclude_event_id=args.exclude,
            now=now,
        )
    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        return EXIT_ERROR
    except EventStoreError as e:
        logger.error(f"Could not load events: {e}")
        return EXIT_ERROR

    print_result(result)
    return EXIT_CONFLICT if result.has_conflict else EXIT_FREE


if __name__ == "__main__":
    sys.exit(main())
