# app/services/expiration/display.py
"""Read-only expiration summary for admin listings."""

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.services.expiration.dates import get_timezone, now_in
from app.services.expiration.store import ExpirationRecord, ExpirationStore

NEVER_LABEL = "Never"
EXPIRED_LABEL = "Expired"


@dataclass
class ExpirationDisplay:
    label: str
    is_expired: bool = False
    raw: str | None = None


def display_for_record(record: ExpirationRecord | None, now: datetime) -> ExpirationDisplay:
    if record is None:
        return ExpirationDisplay(label=NEVER_LABEL)

    if record.expires_at is not None and record.expires_at <= now:
        return ExpirationDisplay(label=EXPIRED_LABEL, is_expired=True, raw=record.raw)

    return ExpirationDisplay(label=record.raw, raw=record.raw)


def describe_expiration(
    db: Session,
    item_id: int,
    *,
    now: datetime | None = None,
    tz: ZoneInfo | None = None,
) -> ExpirationDisplay:
    """
    "Never" without an expiration, "Expired" once it has passed, else the
    stored timestamp as-is.
    """
    tz = get_timezone(tz)
    now = now or now_in(tz)
    return display_for_record(ExpirationStore(db, tz=tz).get(item_id), now)
