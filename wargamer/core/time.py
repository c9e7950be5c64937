"""wargamer.core.time

The only time helper surface in the codebase.

Caches compare against this clock; tests replace it.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return an aware UTC datetime."""

    return datetime.now(tz=UTC)


def elapsed_s(since: datetime, *, now: datetime | None = None) -> float:
    """Return seconds elapsed since ``since``.

    Args:
        since: Reference point. Naive values are assumed UTC.
        now: Override clock for testing.
    """

    ref = now or utc_now()
    if since.tzinfo is None:
        since = since.replace(tzinfo=UTC)
    return (ref - since.astimezone(UTC)).total_seconds()
