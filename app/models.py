# app/models.py
"""
Content Expiration Database Models

Tables:
- User: Content authors and editors (host accounts)
- ContentItem: Posts and pages with their lifecycle status
- ContentMeta: Generic per-item key/value metadata (host store)

Expiration state lives in ContentMeta under the content_expiration and
content_expiration_notified keys; see app.services.expiration.store.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class UserRole(str, Enum):
    """Host account roles, most privileged first."""
    ADMINISTRATOR = "administrator"
    EDITOR = "editor"
    AUTHOR = "author"
    CONTRIBUTOR = "contributor"
    SUBSCRIBER = "subscriber"


# Roles allowed to edit content written by someone else
EDIT_OTHERS_ROLES = {UserRole.ADMINISTRATOR.value, UserRole.EDITOR.value}

# Roles allowed to edit their own content
EDIT_OWN_ROLES = EDIT_OTHERS_ROLES | {UserRole.AUTHOR.value, UserRole.CONTRIBUTOR.value}


# -----------------------------------------------------------------------------
# User
# -----------------------------------------------------------------------------

class User(Base):
    """Host user account. Authors receive expiration notices."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    login = Column(String(64), unique=True, nullable=False)
    display_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    role = Column(String(32), default=UserRole.AUTHOR.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    items = relationship("ContentItem", back_populates="author")


# -----------------------------------------------------------------------------
# ContentItem
# -----------------------------------------------------------------------------

class ContentItem(Base):
    """
    A post or page.

    status is one of draft / publish / expired, or any other host-defined
    status string, which is passed through untouched.
    """
    __tablename__ = "content_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(Text, nullable=False)
    status = Column(String(20), default="draft", nullable=False)
    kind = Column(String(20), default="post", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    author = relationship("User", back_populates="items")
    meta = relationship("ContentMeta", back_populates="item", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_content_items_status", "status"),
        Index("ix_content_items_author_id", "author_id"),
    )


# -----------------------------------------------------------------------------
# ContentMeta
# -----------------------------------------------------------------------------

class ContentMeta(Base):
    """Generic key/value metadata attached to a content item."""
    __tablename__ = "content_meta"
    __table_args__ = (
        UniqueConstraint("item_id", "meta_key", name="uq_content_meta_item_key"),
        Index("ix_content_meta_meta_key", "meta_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(Integer, ForeignKey("content_items.id"), nullable=False)
    meta_key = Column(String(255), nullable=False)
    meta_value = Column(Text, nullable=True)

    # Relationships
    item = relationship("ContentItem", back_populates="meta")
