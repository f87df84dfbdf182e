# app/routers/expiration.py
"""
Expiration endpoints.

PUT  /v1/items/{item_id}/expiration - Apply expiration fields from a content save
GET  /v1/items/{item_id}/expiration - Expiration summary for one item
GET  /v1/admin/expiration/items     - Expiration column for all items
POST /v1/admin/expiration/sweep     - Run the sweep now (for an external cron)
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.auth import require_admin_key
from app.database import get_db
from app.lifecycle_status import StatusRegistry
from app.models import ContentItem, User
from app.services.expiration import describe_expiration, run_expiration_sweep, save_expiration
from app.services.expiration.dates import get_timezone, now_in
from app.services.expiration.display import display_for_record
from app.services.expiration.store import ExpirationStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["expiration"])


# -----------------------------------------------------------------------------
# Request / Response Models
# -----------------------------------------------------------------------------


class ExpirationSaveRequest(BaseModel):
    """Expiration fields submitted with a content save."""

    actor_id: int | None = Field(None, description="User performing the save")
    fields: dict[str, Any] = Field(default_factory=dict, description="Submitted expiration-* form fields")
    is_autosave: bool = Field(False, description="Host autosave; expiration is left untouched")


class ExpirationDisplayResponse(BaseModel):
    """Expiration summary for one item."""

    item_id: int
    label: str
    is_expired: bool
    raw: str | None = None


class ExpirationListItem(ExpirationDisplayResponse):
    """One row of the admin expiration listing."""

    title: str
    kind: str
    status: str
    status_label: str


class SweepResponse(BaseModel):
    """Sweep run result."""

    success: bool
    status: str
    trace_id: str | None
    started_at: datetime | None
    finished_at: datetime | None
    records_scanned: int
    warnings_sent: int
    items_expired: int
    records_skipped: int
    items_failed: int
    mail_failures: int
    errors: list[str]


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


def _get_item_or_404(db: Session, item_id: int) -> ContentItem:
    item = db.get(ContentItem, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


def _status_registry(request: Request) -> StatusRegistry:
    registry = getattr(request.app.state, "status_registry", None)
    return registry or StatusRegistry()


@router.put("/items/{item_id}/expiration", response_model=ExpirationDisplayResponse)
def put_expiration(
    item_id: int,
    payload: ExpirationSaveRequest,
    db: Session = Depends(get_db),
    _: None = Depends(require_admin_key),
) -> ExpirationDisplayResponse:
    """
    Apply submitted expiration fields.

    Invalid or unauthorized submissions are ignored; the response always
    reflects the item's current expiration.
    """
    item = _get_item_or_404(db, item_id)
    actor = db.get(User, payload.actor_id) if payload.actor_id is not None else None

    save_expiration(
        db,
        item.id,
        item.kind,
        payload.fields,
        actor,
        is_autosave=payload.is_autosave,
    )

    display = describe_expiration(db, item_id)
    return ExpirationDisplayResponse(item_id=item_id, **display.__dict__)


@router.get("/items/{item_id}/expiration", response_model=ExpirationDisplayResponse)
def get_expiration(
    item_id: int,
    db: Session = Depends(get_db),
    _: None = Depends(require_admin_key),
) -> ExpirationDisplayResponse:
    _get_item_or_404(db, item_id)
    display = describe_expiration(db, item_id)
    return ExpirationDisplayResponse(item_id=item_id, **display.__dict__)


@router.get("/admin/expiration/items", response_model=list[ExpirationListItem])
def list_expirations(
    request: Request,
    db: Session = Depends(get_db),
    _: None = Depends(require_admin_key),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[ExpirationListItem]:
    """Expiration column for items visible in admin listings."""
    registry = _status_registry(request)
    tz = get_timezone()
    now = now_in(tz)
    store = ExpirationStore(db, tz=tz)

    items = (
        db.query(ContentItem)
        .filter(ContentItem.status.in_(registry.admin_list_statuses()))
        .order_by(ContentItem.id.asc())
        .limit(limit)
        .offset(offset)
        .all()
    )

    out: list[ExpirationListItem] = []
    for item in items:
        display = display_for_record(store.get(item.id), now)
        out.append(
            ExpirationListItem(
                item_id=item.id,
                title=item.title,
                kind=item.kind,
                status=item.status,
                status_label=registry.label_for(item.status),
                **display.__dict__,
            )
        )
    return out


@router.post("/admin/expiration/sweep", response_model=SweepResponse)
def trigger_sweep(
    db: Session = Depends(get_db),
    _: None = Depends(require_admin_key),
) -> SweepResponse:
    """
    Run the expiration sweep.

    Intended for an external hourly cron when the in-process scheduler is
    disabled. Returns status "skipped" if a sweep is already running.
    """
    result = run_expiration_sweep(db)
    return SweepResponse(**result.__dict__)
