# File: schedulr/models/errors.py
"""
Error types for Schedulr.
"""

from typing import Optional


class ValidationError(ValueError):
    """Raised when input to a scheduling operation is malformed."""

    def __init__(self, field: str, message: str, entry_index: Optional[int] = None):
        self.field = field
        self.message = message
        self.entry_index = entry_index
        super().__init__(str(self))

    def __str__(self) -> str:
        """String representation of error."""
        if self.entry_index is not None:
            return f"Entry {self.entry_index} - {self.field}: {self.message}"
        return f"{self.field}: {self.message}"
