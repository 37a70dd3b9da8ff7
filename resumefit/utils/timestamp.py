"""Timestamp helpers for event records and log directory names."""

from datetime import datetime


def now_exact() -> str:
    """Current local time as an ISO 8601 string with microseconds."""
    return datetime.now().isoformat()


def session_stamp() -> str:
    """Compact timestamp for naming log session directories (20251114_123456)."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")
