"""Auto-incrementing counters for human-readable sequence numbers.

Stored as {counter_type, seq} documents, one per type; seq is the last number handed out.
"""

from enum import StrEnum


class CounterType(StrEnum):
    """Entities that use sequential numbering."""

    ORDER = "order"
