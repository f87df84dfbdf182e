# app/services/expiration/sweep.py
"""
Hourly expiration sweep.

For every published item with an expiration set:
- Warn the author once when the expiration is within two weeks
- At expiration, notify the author and move the item to "expired"

Each item is its own unit of work with its own commit. A corrupt
timestamp skips the record; a mail failure is logged and does not stop
the state change; a store failure rolls back that item only. Anything
left undone is picked up by the next hourly run because the guards
(notified flag, published status) are re-evaluated from scratch.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, List, Optional, Protocol
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.constants import ContentStatus, ExpirationDefaults
from app.logging_config import log_stage
from app.services.expiration.dates import get_timezone, now_in, parse_timestamp
from app.services.expiration.notices import Notice, expired_notice, expiring_soon_notice
from app.services.expiration.single_flight import single_flight
from app.services.expiration.store import ExpirationStore, ScheduledExpiration

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send_message(self, recipient: str | None, subject: str, body: str) -> dict[str, Any]: ...


@dataclass
class SweepResult:
    """Result of one sweep run."""
    success: bool
    status: str = "completed"
    trace_id: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    records_scanned: int = 0
    warnings_sent: int = 0
    items_expired: int = 0
    records_skipped: int = 0
    items_failed: int = 0
    mail_failures: int = 0
    errors: List[str] = field(default_factory=list)


def _default_mailer() -> Mailer:
    from app.services.email_service import EmailService

    return EmailService()


def _send(mailer: Mailer, notice: Notice, item_id: int, result: SweepResult) -> bool:
    """Send a notice. Failures are counted and logged, never raised."""
    try:
        response = mailer.send_message(notice.recipient, notice.subject, notice.body)
    except Exception as e:
        response = {"status": "failed", "error": str(e)}

    if response and response.get("status") == "failed":
        result.mail_failures += 1
        logger.warning(
            f"[EXPIRATION] Mail '{notice.subject}' for item {item_id} failed: {response.get('error')}",
            extra={"event": "notice_failed", "item_id": item_id},
        )
        return False
    return True


def process_scheduled_item(
    db: Session,
    store: ExpirationStore,
    entry: ScheduledExpiration,
    mailer: Mailer,
    now: datetime,
    site_url: str,
    result: SweepResult,
) -> None:
    """Evaluate the warning and expiry conditions for one item."""
    item = entry.item

    expires_at = parse_timestamp(entry.raw, store.tz)
    if expires_at is None:
        result.records_skipped += 1
        logger.warning(
            f"[EXPIRATION] Skipping item {item.id}: unreadable expiration '{entry.raw}'",
            extra={"event": "expiration_unparseable", "item_id": item.id},
        )
        return

    if item.status != ContentStatus.PUBLISHED:
        return

    warn_before = now + timedelta(days=ExpirationDefaults.WARNING_WINDOW_DAYS)
    if expires_at <= warn_before and not entry.notified:
        delivered = _send(mailer, expiring_soon_notice(item, site_url), item.id, result)
        store.mark_notified(item.id)
        db.commit()
        if delivered:
            result.warnings_sent += 1
            logger.info(
                f"[EXPIRATION] Warned author of item {item.id}",
                extra={"event": "expiration_warned", "item_id": item.id},
            )

    # Not an elif: an item at or past its expiration gets both in one run
    if expires_at <= now and item.status == ContentStatus.PUBLISHED:
        _send(mailer, expired_notice(item, site_url), item.id, result)
        item.status = ContentStatus.EXPIRED
        db.add(item)
        db.commit()
        result.items_expired += 1
        logger.info(
            f"[EXPIRATION] Expired item {item.id}",
            extra={"event": "item_expired", "item_id": item.id},
        )


def run_expiration_sweep(
    db: Session,
    mailer: Mailer | None = None,
    *,
    now: datetime | None = None,
    tz: ZoneInfo | None = None,
    site_url: str | None = None,
) -> SweepResult:
    """
    Run one expiration sweep.

    Args:
        db: Database session
        mailer: Notification transport (defaults to EmailService)
        now: Override the current time (tests)
        tz: Override the configured timezone
        site_url: Override the site URL quoted in emails

    Returns:
        SweepResult with counters; status "skipped" if another sweep is running
    """
    tz = get_timezone(tz)
    now = now or now_in(tz)
    if site_url is None:
        from app.config import get_settings

        site_url = get_settings().SITE_URL

    result = SweepResult(success=True, trace_id=str(uuid.uuid4()), started_at=datetime.utcnow())

    with single_flight(db) as acquired:
        if not acquired:
            logger.warning(
                "[EXPIRATION] Sweep already running, skipping this invocation",
                extra={"event": "sweep_skipped"},
            )
            result.status = "skipped"
            result.finished_at = datetime.utcnow()
            return result

        with log_stage("expiration_sweep", trace_id=result.trace_id):
            mailer = mailer or _default_mailer()
            store = ExpirationStore(db, tz=tz)
            entries = store.list_scheduled()
            result.records_scanned = len(entries)

            # Ids up front: a rollback expires every loaded item
            item_ids = [entry.item.id for entry in entries]

            for item_id, entry in zip(item_ids, entries):
                try:
                    process_scheduled_item(db, store, entry, mailer, now, site_url, result)
                except Exception as e:
                    db.rollback()
                    result.items_failed += 1
                    result.errors.append(f"Item {item_id}: {e}")
                    logger.error(
                        f"[EXPIRATION] Failed to process item {item_id}: {e}",
                        extra={"event": "item_failed", "item_id": item_id},
                    )

    if result.items_failed > 0:
        result.success = False
        result.status = "partial"

    result.finished_at = datetime.utcnow()
    logger.info(
        f"[EXPIRATION] Sweep complete: {result.records_scanned} scanned, "
        f"{result.warnings_sent} warned, {result.items_expired} expired, "
        f"{result.records_skipped} skipped, {result.items_failed} failed",
        extra={
            "event": "sweep_complete",
            "items_processed": result.records_scanned,
            "items_failed": result.items_failed,
        },
    )
    return result
