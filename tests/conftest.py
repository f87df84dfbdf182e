# tests/conftest.py
"""
Pytest configuration and fixtures.
"""

import itertools
import os
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

# Set test environment
os.environ.setdefault("TESTING", "1")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
os.environ.setdefault("EXPIRATION_TIMEZONE", "America/New_York")
os.environ.setdefault("EXPIRATION_SCHEDULER_ENABLED", "false")
os.environ.setdefault("SITE_URL", "https://example.org")
os.environ.setdefault("LOG_JSON", "false")

TZ = ZoneInfo("America/New_York")

# A sweep-aligned moment (hh:01:00) so stored timestamps compare exactly
NOW = datetime(2026, 10, 19, 10, 1, 0, tzinfo=TZ)


@pytest.fixture
def tz():
    return TZ


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def db():
    """Fresh in-memory schema per test."""
    from app import models  # noqa: F401
    from app.database import Base, SessionLocal, engine

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_user(db):
    """Factory for host users."""
    from app.models import User

    counter = itertools.count(1)

    def _make(role="author", display_name=None, email=None, is_active=True):
        n = next(counter)
        user = User(
            login=f"user{n}",
            display_name=display_name or f"User {n}",
            email=email or f"user{n}@example.org",
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_item(db, make_user):
    """Factory for content items."""
    from app.models import ContentItem

    def _make(author=None, status="publish", kind="post", title="Quarterly Report"):
        author = author or make_user()
        item = ContentItem(author_id=author.id, title=title, status=status, kind=kind)
        db.add(item)
        db.commit()
        return item

    return _make


@pytest.fixture
def store(db):
    from app.services.expiration.store import ExpirationStore

    return ExpirationStore(db, tz=TZ)
