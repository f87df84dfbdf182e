# app/auth.py
"""Shared authentication and authorization helpers."""

import os
import secrets

from fastapi import Header, HTTPException

from app.models import EDIT_OTHERS_ROLES, EDIT_OWN_ROLES, ContentItem, User


def require_admin_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> None:
    """Validate admin API key. Fails closed if ADMIN_API_KEY is not set."""
    expected_key = os.getenv("ADMIN_API_KEY")

    if not expected_key:
        raise HTTPException(
            status_code=500,
            detail="Server misconfiguration: admin authentication not configured",
        )

    if not x_api_key or not secrets.compare_digest(x_api_key, expected_key):
        raise HTTPException(
            status_code=401,
            detail="Invalid or missing API key",
        )


def can_edit_item(actor: User | None, item: ContentItem) -> bool:
    """
    Whether actor may edit item.

    Administrators and editors may edit anything; authors and contributors
    only what they wrote. Inactive or missing accounts may edit nothing.
    """
    if actor is None or not actor.is_active:
        return False
    if actor.role in EDIT_OTHERS_ROLES:
        return True
    return actor.role in EDIT_OWN_ROLES and actor.id == item.author_id
