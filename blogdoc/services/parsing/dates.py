"""Front-matter timestamp parsing.

Posts are dated like ``2024-06-29 12:00:00 -0300``. The offset is mandatory:
a naive timestamp would silently shift when the site is built in another
timezone.
"""

import re
from datetime import date, datetime, timedelta, timezone

from blogdoc.errors import MalformedDateError

_TIMESTAMP_RE = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})"
    r"(?:[Tt]|[ \t]+)"
    r"(?P<hour>\d{1,2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d+))?)?"
    r"[ \t]*(?P<offset>[Zz]|[+-]\d{2}(?::?\d{2})?)$"
)


def _parse_offset(raw: str) -> timezone:
    if raw in ("Z", "z"):
        return timezone.utc
    sign = -1 if raw[0] == "-" else 1
    digits = raw[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4] or 0)
    if hours > 23 or minutes > 59:
        raise ValueError(f"offset out of range: {raw}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_timestamp(value: object, field: str = "date") -> datetime:
    """Parse a front-matter timestamp into an offset-aware datetime.

    Raises:
        MalformedDateError: If the value is not a timestamp or has no offset.
    """
    if isinstance(value, datetime):
        if value.utcoffset() is None:
            raise MalformedDateError(field, value)
        return value
    if isinstance(value, date) or not isinstance(value, str):
        raise MalformedDateError(field, value)

    match = _TIMESTAMP_RE.match(value.strip())
    if not match:
        raise MalformedDateError(field, value)

    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    try:
        return datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second") or 0),
            int(fraction),
            tzinfo=_parse_offset(match.group("offset")),
        )
    except ValueError as exc:
        raise MalformedDateError(field, value) from exc


def format_timestamp(value: datetime) -> str:
    """Format a timestamp the way post front matter writes it."""
    pattern = "-%m-%d %H:%M:%S.%f %z" if value.microsecond else "-%m-%d %H:%M:%S %z"
    # %Y is not zero-padded below year 1000 on every platform
    return f"{value.year:04d}" + value.strftime(pattern)
