"""
UTC datetime utilities for consistent timezone handling.

All timestamps written to the document store are timezone-aware UTC.
Calendar values (entry/exit dates, birth years) use the UTC calendar day.
"""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of datetime.now() or datetime.utcnow().

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def utc_today() -> date:
    """Return today's date in UTC."""
    return utc_now().date()


def current_year() -> int:
    """Return the current calendar year (UTC). Source of truth for worker age."""
    return utc_now().year


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository boundaries to normalize datetimes read from documents.

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_date(value: date | datetime | str | None) -> date | None:
    """Parse an ISO date (or datetime) into a date; None and '' give None.

    Documents written by older clients may hold full ISO timestamps
    (``2024-05-01T00:00:00.000Z``) where a plain date is expected.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if "T" in text:
        return ensure_utc(datetime.fromisoformat(text.replace("Z", "+00:00"))).date()
    return date.fromisoformat(text)
