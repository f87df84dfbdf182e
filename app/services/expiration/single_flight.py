# app/services/expiration/single_flight.py
"""
Single-flight guard for the expiration sweep.

A process-wide lock rejects overlapping runs inside one process. On
PostgreSQL a session-level advisory lock, held on a dedicated connection
for the whole run, also rejects runs from other processes.
"""

import logging
import threading
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Arbitrary application-wide key for pg_try_advisory_lock ("CEXP")
ADVISORY_LOCK_KEY = 0x43455850

_process_lock = threading.Lock()


@contextmanager
def _advisory_lock(db: Session):
    bind = db.get_bind()
    if bind.dialect.name != "postgresql":
        yield True
        return

    with bind.connect() as conn:
        acquired = conn.execute(
            text("SELECT pg_try_advisory_lock(:key)"), {"key": ADVISORY_LOCK_KEY}
        ).scalar()
        if not acquired:
            yield False
            return
        try:
            yield True
        finally:
            conn.execute(text("SELECT pg_advisory_unlock(:key)"), {"key": ADVISORY_LOCK_KEY})


@contextmanager
def single_flight(db: Session):
    """
    Yield True if this caller holds the sweep, False if another run does.

    Usage:
        with single_flight(db) as acquired:
            if not acquired:
                return
            ...
    """
    if not _process_lock.acquire(blocking=False):
        yield False
        return

    try:
        with _advisory_lock(db) as acquired:
            yield acquired
    finally:
        _process_lock.release()


def is_running() -> bool:
    """Whether a sweep currently holds the in-process lock."""
    return _process_lock.locked()
