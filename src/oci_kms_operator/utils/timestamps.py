"""RFC 3339 timestamp parsing and formatting."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from .errors import InvalidTimestampError

_RFC3339 = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp with optional fractional seconds.

    Fractions finer than microseconds are truncated.

    Args:
        value: Timestamp string, e.g. "2024-05-01T10:00:00.123456789Z"

    Returns:
        Timezone-aware datetime

    Raises:
        InvalidTimestampError: If the value does not match the profile
    """
    match = _RFC3339.match(value or "")
    if not match:
        raise InvalidTimestampError(f"'{value}' is not an RFC 3339 timestamp")

    fraction = (match.group("fraction") or "").ljust(6, "0")[:6]
    offset = match.group("offset")
    try:
        parsed = datetime.strptime(
            f"{match.group('date')}T{match.group('time')}.{fraction}",
            "%Y-%m-%dT%H:%M:%S.%f",
        )
        if offset in ("Z", "z"):
            tz = timezone.utc
        else:
            sign = 1 if offset[0] == "+" else -1
            hours, minutes = int(offset[1:3]), int(offset[4:6])
            tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    except ValueError as e:
        raise InvalidTimestampError(f"'{value}' is not a valid timestamp: {e}") from e

    return parsed.replace(tzinfo=tz)


def format_rfc3339(value: datetime) -> str:
    """Format a datetime as RFC 3339 in UTC with microsecond precision.

    Naive datetimes are assumed to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
