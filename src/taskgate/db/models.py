"""
taskgate.db.models

Persistence schema.

Responsibilities:
- users: principals with profile fields and a role.
- token_records: issued bearer tokens with owner and absolute expiry.
- tasks: per-user tasks guarded by the gate.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskgate.auth.models import DEFAULT_ROLE
from taskgate.db.base import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(128), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    birth_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    # Plain string, not a DB enum: unknown stored values must reach parse_role().
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=DEFAULT_ROLE.value)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )


class TokenRecordRow(Base):
    __tablename__ = "token_records"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    # Indexed for lookup; not unique, issuance does no uniqueness check.
    token: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    # No FK: a record may outlive its user, which the gate reports as unknown principal.
    user_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_token_records_expires_at", "expires_at"),)


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[str | None] = mapped_column(String(64), nullable=True)
    category: Mapped[str | None] = mapped_column(String(128), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )


# --- Module Notes -----------------------------------------------------------
# Expired token records are never removed implicitly; see
# `TokenRepo.purge_expired` for the explicit sweep.
