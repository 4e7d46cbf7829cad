"""Tolerant timestamp parsing for source payloads.

Sources disagree on date formats: ISO-8601 with "Z", spreadsheet-style
"3/5/2024 14:00", folder dates "2024-03-05". Parsing never raises.
"""

from datetime import UTC, date, datetime

import dateparser

_SETTINGS: dict = {
    "RETURN_AS_TIMEZONE_AWARE": False,
    "TO_TIMEZONE": "UTC",
    "DATE_ORDER": "MDY",
    "TIMEZONE": "UTC",
}


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def parse_timestamp(raw: str | datetime | date | None) -> datetime | None:
    """Parse a source timestamp into a naive UTC datetime.

    Args:
        raw: String, datetime, or date from a source payload

    Returns:
        Parsed datetime, or None if raw is empty or unparseable

    Examples:
        >>> parse_timestamp("2024-03-05T14:00:00Z")
        datetime.datetime(2024, 3, 5, 14, 0)
        >>> parse_timestamp("not a date") is None
        True
    """
    if raw is None:
        return None

    if isinstance(raw, datetime):
        return _to_naive_utc(raw)
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)

    text = raw.strip()
    if not text:
        return None

    try:
        return _to_naive_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    try:
        return dateparser.parse(text, settings=_SETTINGS)
    except Exception:
        # dateparser can raise various exceptions on malformed input
        return None
