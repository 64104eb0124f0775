"""
Domain time utilities (pure).

Centralized timestamp validation and clock helpers.

Behavior and error messages must remain consistent across the domain model.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

# Smallest step a datetime can move forward.
_TICK = timedelta(microseconds=1)


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces that timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""

    return datetime.now(timezone.utc)


def strictly_after(candidate: datetime, previous: datetime) -> datetime:
    """
    Return `candidate` if it is later than `previous`, otherwise `previous`
    moved forward by one microsecond.

    Wall clocks can repeat a reading on fast machines; mutation timestamps
    must still move forward.
    """

    if candidate > previous:
        return candidate
    return previous + _TICK
