"""Timestamp formats used in persisted records and file names."""

from datetime import UTC, datetime


SAFE_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


def iso_timestamp(now: datetime | None = None) -> str:
    """Format as ISO 8601 UTC with milliseconds, e.g. ``2026-01-31T12:00:00.123Z``."""
    moment = (now or utc_now()).astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def safe_timestamp(now: datetime | None = None) -> str:
    """Format for file names, e.g. ``2026-01-31T12-00-00``."""
    return (now or utc_now()).astimezone(UTC).strftime(SAFE_TIMESTAMP_FORMAT)
