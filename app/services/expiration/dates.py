# app/services/expiration/dates.py
"""
Date helpers shared by the setter, the sweep and the display.

Every helper that builds or parses a moment returns None on failure
instead of raising; callers treat None as "skip" or "no change".
"""

import re
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from app.constants import ExpirationDefaults, ExpirationFields

_DIGITS = re.compile(r"[0-9]+")
_YEAR = re.compile(r"[0-9]{4}")


def get_timezone(tz: ZoneInfo | str | None = None) -> ZoneInfo:
    """Resolve tz, falling back to the configured expiration timezone."""
    if isinstance(tz, ZoneInfo):
        return tz
    if tz:
        return ZoneInfo(tz)

    from app.config import get_settings

    return get_settings().timezone


def now_in(tz: ZoneInfo) -> datetime:
    return datetime.now(tz)


def is_digits(value) -> bool:
    """True for a non-empty string of ASCII digits (ints are accepted too)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and bool(_DIGITS.fullmatch(value))


def format_timestamp(moment: datetime) -> str:
    return moment.strftime(ExpirationFields.TIMESTAMP_FORMAT)


def parse_timestamp(value: str | None, tz: ZoneInfo) -> datetime | None:
    """
    Parse a stored expiration timestamp.

    Accepts the stored format and ISO-8601. Naive values are read in tz.
    Returns None for empty or corrupt values.
    """
    if not value or not isinstance(value, str):
        return None

    value = value.strip()
    try:
        parsed = datetime.strptime(value, ExpirationFields.TIMESTAMP_FORMAT)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def parse_days(value) -> int | None:
    """Validate an "expire in N days" input. None unless 1 <= N <= 1824."""
    if not is_digits(value):
        return None
    days = int(value)
    if days < ExpirationDefaults.MIN_DAYS or days > ExpirationDefaults.MAX_DAYS:
        return None
    return days


def expiration_in_days(days: int, now: datetime) -> datetime:
    """now + days, pinned to the sweep minute of that hour."""
    future = now + timedelta(days=days)
    return future.replace(minute=ExpirationDefaults.SWEEP_MINUTE, second=0, microsecond=0)


def compose_expiration(month, day, year, hour, ampm, tz: ZoneInfo) -> datetime | None:
    """
    Build an expiration moment from the by-date picker fields.

    month, day and hour must be digit strings, year exactly four digits,
    hour 1-12 and ampm "am" or "pm". Impossible calendar dates such as
    Feb 30 are left for the datetime constructor to reject.
    """
    if not (is_digits(month) and is_digits(day) and is_digits(hour)):
        return None
    if not (isinstance(year, str) and _YEAR.fullmatch(year)) and not (isinstance(year, int) and 1000 <= year <= 9999):
        return None
    if ampm not in ("am", "pm"):
        return None

    hour = int(hour)
    if hour < 1 or hour > 12:
        return None
    hour_24 = hour % 12 + (12 if ampm == "pm" else 0)

    try:
        return datetime(int(year), int(month), int(day), hour_24, 0, 0, tzinfo=tz)
    except ValueError:
        return None
