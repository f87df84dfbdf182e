# app/constants.py
"""
Centralized magic constants organized by domain.

All hardcoded numbers/strings used throughout the codebase should be
defined here with documentation explaining their purpose.
"""


class ExpirationDefaults:
    """Timing rules for expirations and the hourly sweep."""

    # Setter: "expire in N days" bounds (just under 5 years)
    MIN_DAYS = 1
    MAX_DAYS = 1824

    # Sweep: authors are warned this many days before expiry
    WARNING_WINDOW_DAYS = 14

    # Sweep runs every hour at this minute; by-days expirations align to it
    SWEEP_MINUTE = 1

    # Timezone used when EXPIRATION_TIMEZONE is not configured
    TIMEZONE = "America/New_York"

    # How far ahead the by-date picker offers years
    MAX_YEARS_AHEAD = 5


class ExpirationFields:
    """Keys used in the host metadata store and in submitted save payloads."""

    # content_meta keys
    META_EXPIRATION = "content_expiration"
    META_NOTIFIED = "content_expiration_notified"
    NOTIFIED_VALUE = "yes"

    # Stored timestamp format, e.g. "2026-11-02 03:01:00 PM -0500"
    TIMESTAMP_FORMAT = "%Y-%m-%d %I:%M:%S %p %z"

    # Submitted form fields
    STATUS = "expiration-status"
    DAYS = "expiration-days"
    MONTH = "expiration-month"
    DAY = "expiration-day"
    YEAR = "expiration-year"
    HOUR = "expiration-hour"
    AMPM = "expiration-ampm"

    # expiration-status values
    MODE_NO_CHANGE = "nochange"
    MODE_DISABLE = "disable"
    MODE_BY_DAYS = "by-days"
    MODE_BY_DATE = "by-date"


class ContentStatus:
    """Lifecycle status values as stored on content items."""

    DRAFT = "draft"
    PUBLISHED = "publish"
    EXPIRED = "expired"


class ContentKind:
    """Content kinds that support expiration."""

    POST = "post"
    PAGE = "page"

    SUPPORTED = frozenset({POST, PAGE})


class SchedulerDefaults:
    """In-process scheduler settings."""

    JOB_ID_PREFIX = "content-expiration_"
    MISFIRE_GRACE_SECONDS = 300
