"""
identity_probe.db.models

Persistence schema for the identity store.

Responsibilities:
- Define the `User` entity: identifier, display name, email, optional phone number,
  plus the normalized lookup keys and stamps the identity layer maintains.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from identity_probe.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps; SQLite has no timezone-aware type.
    return datetime.utcnow()


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    user_name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_user_name: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)

    # Uniqueness of emails is a policy (`require_unique_email`), so only indexed here.
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    normalized_email: Mapped[str | None] = mapped_column(String(256), nullable=True)

    password_hash: Mapped[str | None] = mapped_column(String(128), nullable=True)
    security_stamp: Mapped[str] = mapped_column(String(36), nullable=False, default=_new_id)
    concurrency_stamp: Mapped[str] = mapped_column(String(36), nullable=False, default=_new_id)

    phone_number: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (Index("ix_users_normalized_email", "normalized_email"),)

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, user_name={self.user_name!r}, email={self.email!r})"


# --- Module Notes -----------------------------------------------------------
# `concurrency_stamp` is rotated on every successful update; callers holding a stale
# copy of the row get a ConcurrencyFailure instead of overwriting newer data.
