"""Convertors turning raw filter text into typed values."""

from datetime import datetime, timezone

from gridquery.exceptions import InvalidQueryError


def to_utc_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp and normalize it to UTC.

    Naive timestamps are taken as local time.
    """

    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as exc:
        raise InvalidQueryError(f"{value!r} is not a valid date/time.") from exc
    return parsed.astimezone(timezone.utc)
