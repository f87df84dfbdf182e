# app/services/expiration/setter.py
"""
Expiration setter.

Handles the expiration fields submitted when a post or page is saved.
Every rejection (unauthenticated or unauthorized actor, unsupported kind,
autosave, malformed or out-of-range fields, impossible dates) is silent:
the item keeps its previous expiration and the caller just gets the item
id back.
"""

import logging
from datetime import datetime
from typing import Any, Mapping
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth import can_edit_item
from app.constants import ContentKind, ExpirationFields
from app.models import ContentItem, User
from app.services.expiration.dates import (
    compose_expiration,
    expiration_in_days,
    get_timezone,
    now_in,
    parse_days,
)
from app.services.expiration.store import ExpirationStore

logger = logging.getLogger(__name__)


def resolve_expiration(
    fields: Mapping[str, Any],
    now: datetime,
    tz: ZoneInfo,
) -> tuple[str, datetime | None]:
    """
    Turn submitted fields into an action.

    Returns ("disable", None), ("set", moment) or ("none", None).
    """
    mode = fields.get(ExpirationFields.STATUS)

    if mode == ExpirationFields.MODE_DISABLE:
        return "disable", None

    if mode == ExpirationFields.MODE_BY_DAYS:
        days = parse_days(fields.get(ExpirationFields.DAYS))
        if days is None:
            return "none", None
        return "set", expiration_in_days(days, now)

    if mode == ExpirationFields.MODE_BY_DATE:
        moment = compose_expiration(
            fields.get(ExpirationFields.MONTH),
            fields.get(ExpirationFields.DAY),
            fields.get(ExpirationFields.YEAR),
            fields.get(ExpirationFields.HOUR),
            fields.get(ExpirationFields.AMPM),
            tz,
        )
        if moment is None:
            return "none", None
        return "set", moment

    # nochange, unknown or missing mode
    return "none", None


def save_expiration(
    db: Session,
    item_id: int,
    kind: str,
    fields: Mapping[str, Any] | None,
    actor: User | None,
    *,
    is_autosave: bool = False,
    now: datetime | None = None,
    tz: ZoneInfo | None = None,
) -> int:
    """
    Apply the expiration fields from a content save.

    Args:
        db: Database session
        item_id: Saved content item
        kind: Content kind reported by the host ("post" or "page")
        fields: Submitted form fields
        actor: User performing the save
        is_autosave: Host autosaves never touch the expiration
        now: Override the current time (tests)
        tz: Override the configured timezone

    Returns:
        item_id, whether or not anything changed
    """
    if is_autosave or not fields:
        return item_id

    if kind not in ContentKind.SUPPORTED:
        return item_id

    item = db.get(ContentItem, item_id)
    if item is None or not can_edit_item(actor, item):
        logger.debug(f"[EXPIRATION] Ignoring save for item {item_id}: not permitted")
        return item_id

    tz = get_timezone(tz)
    now = now or now_in(tz)

    action, moment = resolve_expiration(fields, now, tz)
    if action == "none":
        return item_id

    store = ExpirationStore(db, tz=tz)
    try:
        if action == "disable":
            store.clear(item_id)
            logger.info(
                f"[EXPIRATION] Disabled expiration for item {item_id}",
                extra={"event": "expiration_cleared", "item_id": item_id},
            )
        else:
            record = store.set_expiration(item_id, moment)
            logger.info(
                f"[EXPIRATION] Item {item_id} expires {record.raw}",
                extra={"event": "expiration_set", "item_id": item_id},
            )
        db.commit()
    except SQLAlchemyError as e:
        logger.error(
            f"[EXPIRATION] Failed to save expiration for item {item_id}: {e}",
            extra={"event": "expiration_save_failed", "item_id": item_id},
        )
        db.rollback()

    return item_id
