# app/services/expiration/registration.py
"""
Startup wiring for the expiration feature.

- Registers the "expired" lifecycle status (hidden, not searchable,
  listed in admin views)
- Registers the hourly sweep with an APScheduler scheduler at minute 1
- Removes the sweep job again on shutdown
"""

import logging
from typing import Callable
from zoneinfo import ZoneInfo

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger

from app.constants import ContentStatus, ExpirationDefaults, SchedulerDefaults
from app.lifecycle_status import StatusDefinition, StatusRegistry

logger = logging.getLogger(__name__)

EXPIRED_STATUS = StatusDefinition(
    name=ContentStatus.EXPIRED,
    label="Expired",
    label_count="Expired (%s)",
    public=False,
    exclude_from_search=True,
    show_in_admin_all_list=True,
    show_in_admin_status_list=True,
)


def register_expired_status(registry: StatusRegistry) -> StatusDefinition:
    return registry.register(EXPIRED_STATUS)


def sweep_job_id(site_id: int) -> str:
    return f"{SchedulerDefaults.JOB_ID_PREFIX}{site_id}"


def run_sweep_job() -> None:
    """Scheduler entry point: run one sweep in its own session."""
    from app.database import SessionLocal
    from app.services.expiration.sweep import run_expiration_sweep

    db = SessionLocal()
    try:
        run_expiration_sweep(db)
    except Exception as e:
        logger.error(f"[EXPIRATION] Scheduled sweep failed: {e}", exc_info=True)
    finally:
        db.close()


def register_sweep_trigger(
    scheduler: BaseScheduler,
    *,
    site_id: int,
    tz: ZoneInfo,
    job: Callable[[], None] = run_sweep_job,
) -> bool:
    """
    Schedule the hourly sweep unless a job for this site already exists.

    Returns True if a job was added.
    """
    job_id = sweep_job_id(site_id)
    if scheduler.get_job(job_id) is not None:
        logger.debug(f"[EXPIRATION] Sweep job {job_id} already scheduled")
        return False

    scheduler.add_job(
        job,
        trigger=CronTrigger(minute=ExpirationDefaults.SWEEP_MINUTE, timezone=tz),
        id=job_id,
        name="Content expiration sweep",
        max_instances=1,
        coalesce=True,
        misfire_grace_time=SchedulerDefaults.MISFIRE_GRACE_SECONDS,
    )
    logger.info(
        f"[EXPIRATION] Scheduled hourly sweep {job_id} at minute {ExpirationDefaults.SWEEP_MINUTE}",
        extra={"event": "sweep_scheduled", "job_id": job_id},
    )
    return True


def unregister_sweep_trigger(scheduler: BaseScheduler, *, site_id: int) -> bool:
    """Remove the sweep job. Returns True if one was removed."""
    job_id = sweep_job_id(site_id)
    if scheduler.get_job(job_id) is None:
        return False
    scheduler.remove_job(job_id)
    logger.info(f"[EXPIRATION] Removed sweep job {job_id}", extra={"event": "sweep_unscheduled", "job_id": job_id})
    return True
