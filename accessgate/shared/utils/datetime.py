"""UTC datetime helpers.

Every timestamp accessgate stores or compares (subscription windows,
role expiry, credential expiry) is timezone-aware UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize a datetime to aware UTC at persistence boundaries.

    Naive values are assumed to already be UTC (SQLite drops tzinfo on
    round-trip); aware values are converted.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def from_timestamp_utc(timestamp: float) -> datetime:
    """Convert a Unix timestamp (e.g. a credential's exp claim) to aware UTC."""
    return datetime.fromtimestamp(timestamp, tz=UTC)
