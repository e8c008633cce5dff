# File: schedulr/models/enums.py

from enum import Enum


class EventSource(Enum):
    """Where an event came from. Only used for display labeling."""
    OWNED = "owned"    # created directly by the user
    SYNCED = "synced"  # mirrored from a connected external calendar
