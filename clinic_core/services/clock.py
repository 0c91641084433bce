"""Instant arithmetic shared by the scoring and reminder rules.

Every rule receives `now` from the caller; nothing here reads the system clock.
"""

from datetime import UTC, datetime, timedelta

ONE_DAY = timedelta(days=1)


def as_utc(moment: datetime) -> datetime:
    """Treat naive instants as UTC so they compare with stored timestamps."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def elapsed(since: datetime, now: datetime) -> timedelta:
    return as_utc(now) - as_utc(since)


def whole_days_between(since: datetime, now: datetime) -> int:
    """Number of complete days from `since` to `now`, truncated toward zero."""
    return int(elapsed(since, now) / ONE_DAY)
