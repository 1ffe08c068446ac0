"""SQLAlchemy ORM models – contacts and tasks."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, validates


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _required(field: str, value: str | None) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError(f"{field} is required")
    return cleaned


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


# ---------------------------------------------------------------------------
# base
# ---------------------------------------------------------------------------


class Base(AsyncAttrs, DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# records
# ---------------------------------------------------------------------------


class Contact(Base):
    __tablename__ = "contacts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), index=True)
    phone_number: Mapped[str] = mapped_column(String(64))
    relationship: Mapped[str | None] = mapped_column(String(128), nullable=True, default=None)
    prompt: Mapped[str] = mapped_column(Text)  # utterance that produced the record
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    @validates("name", "phone_number", "prompt")
    def _validate_required(self, key: str, value: str | None) -> str:
        return _required(key, value)

    @validates("relationship")
    def _validate_relationship(self, key: str, value: str | None) -> str | None:
        return _optional(value)


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    description: Mapped[str] = mapped_column(Text)
    time: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)  # free text
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    prompt: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("ix_tasks_pending_created", "is_completed", "created_at"),
    )

    @validates("description", "prompt")
    def _validate_required(self, key: str, value: str | None) -> str:
        return _required(key, value)

    @validates("time")
    def _validate_time(self, key: str, value: str | None) -> str | None:
        return _optional(value)
