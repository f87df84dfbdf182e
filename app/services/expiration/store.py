# app/services/expiration/store.py
"""
Typed access to expiration state.

The host keeps expirations in its generic content_meta key/value table.
ExpirationStore is the only code that knows the key names; everything else
works with ExpirationRecord.

Store methods flush but never commit. The caller owns the transaction.
"""

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from sqlalchemy import and_
from sqlalchemy.orm import Session, joinedload

from app.constants import ExpirationFields
from app.models import ContentItem, ContentMeta
from app.services.expiration.dates import format_timestamp, get_timezone, parse_timestamp


@dataclass
class ExpirationRecord:
    """Expiration state of one content item."""
    item_id: int
    expires_at: datetime | None
    notified: bool = False
    raw: str | None = None


@dataclass
class ScheduledExpiration:
    """A content item with an expiration set, as read by the sweep."""
    item: ContentItem
    raw: str
    notified: bool


class ExpirationStore:
    """Read/write expiration records for content items."""

    def __init__(self, db: Session, tz: ZoneInfo | None = None):
        self.db = db
        self.tz = get_timezone(tz)

    def _meta(self, item_id: int, key: str) -> ContentMeta | None:
        return (
            self.db.query(ContentMeta)
            .filter(ContentMeta.item_id == item_id, ContentMeta.meta_key == key)
            .first()
        )

    def get(self, item_id: int) -> ExpirationRecord | None:
        """
        Get the expiration record for an item.

        Returns None when no expiration is set. A corrupt stored value
        yields a record with expires_at=None and the raw string kept.
        """
        row = self._meta(item_id, ExpirationFields.META_EXPIRATION)
        if row is None or not row.meta_value:
            return None

        return ExpirationRecord(
            item_id=item_id,
            expires_at=parse_timestamp(row.meta_value, self.tz),
            notified=self.is_notified(item_id),
            raw=row.meta_value,
        )

    def is_notified(self, item_id: int) -> bool:
        return self._meta(item_id, ExpirationFields.META_NOTIFIED) is not None

    def set_expiration(self, item_id: int, expires_at: datetime) -> ExpirationRecord:
        """Set or replace the expiration and clear the notified flag."""
        value = format_timestamp(expires_at)

        row = self._meta(item_id, ExpirationFields.META_EXPIRATION)
        if row is None:
            row = ContentMeta(item_id=item_id, meta_key=ExpirationFields.META_EXPIRATION)
        row.meta_value = value
        self.db.add(row)

        self._delete(item_id, ExpirationFields.META_NOTIFIED)
        self.db.flush()

        return ExpirationRecord(item_id=item_id, expires_at=expires_at, notified=False, raw=value)

    def clear(self, item_id: int) -> None:
        """Remove both the expiration and the notified flag."""
        self._delete(item_id, ExpirationFields.META_EXPIRATION)
        self._delete(item_id, ExpirationFields.META_NOTIFIED)
        self.db.flush()

    def mark_notified(self, item_id: int) -> None:
        """Record that the expiring-soon warning went out for the current expiration."""
        if self.is_notified(item_id):
            return
        self.db.add(
            ContentMeta(
                item_id=item_id,
                meta_key=ExpirationFields.META_NOTIFIED,
                meta_value=ExpirationFields.NOTIFIED_VALUE,
            )
        )
        self.db.flush()

    def list_scheduled(self) -> list[ScheduledExpiration]:
        """All items with a non-empty expiration, with their author loaded."""
        rows = (
            self.db.query(ContentMeta, ContentItem)
            .join(ContentItem, ContentMeta.item_id == ContentItem.id)
            .options(joinedload(ContentItem.author))
            .filter(
                and_(
                    ContentMeta.meta_key == ExpirationFields.META_EXPIRATION,
                    ContentMeta.meta_value.isnot(None),
                    ContentMeta.meta_value != "",
                )
            )
            .order_by(ContentMeta.item_id.asc())
            .all()
        )

        notified_ids = {
            item_id
            for (item_id,) in self.db.query(ContentMeta.item_id)
            .filter(ContentMeta.meta_key == ExpirationFields.META_NOTIFIED)
            .all()
        }

        return [
            ScheduledExpiration(item=item, raw=meta.meta_value, notified=item.id in notified_ids)
            for meta, item in rows
        ]

    def _delete(self, item_id: int, key: str) -> None:
        self.db.query(ContentMeta).filter(
            ContentMeta.item_id == item_id,
            ContentMeta.meta_key == key,
        ).delete(synchronize_session=False)
