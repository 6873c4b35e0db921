"""
Wire formatting and permissive parsing.

Used by both the GPX reader and writer. Parsers follow parse-or-absent
semantics: text that does not parse yields None, never an exception.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional


def format_double(value: float) -> str:
    """
    Format a float locale-invariantly, without grouping or exponent.

    Uses the shortest text that reads back as the same float.

    Examples:
        format_double(46.57608333) -> '46.57608333'
        format_double(1e-05) -> '0.00001'
    """
    return format(Decimal(repr(float(value))), "f")


def format_time(value: datetime) -> str:
    """
    Format a timestamp as yyyy-MM-ddTHH:mm:ss.fffZ in UTC.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)

    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


def parse_double(text: Optional[str]) -> Optional[float]:
    """Parse a decimal number, None if missing or unparsable."""
    if text is None:
        return None
    try:
        return float(text.strip())
    except ValueError:
        return None


def parse_uint(text: Optional[str]) -> Optional[int]:
    """Parse a non-negative integer, None if missing, negative or unparsable."""
    if text is None:
        return None
    try:
        value = int(text.strip())
    except ValueError:
        return None
    return value if value >= 0 else None


def parse_time(text: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into an aware UTC datetime.

    Accepts a trailing 'Z', explicit offsets and any fraction length.
    Timestamps without an offset are taken to be UTC.

    Returns:
        datetime in UTC, or None if missing or unparsable
    """
    if text is None:
        return None
    try:
        value = datetime.fromisoformat(text.strip())
    except ValueError:
        return None

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
