"""Thin data-access helpers on top of SQLAlchemy async sessions.

Each repository is instantiated with a scoped AsyncSession and provides
typed insert/query for one record kind.  Business logic stays in the
pipeline.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from speech_intent.storage.models import Contact, Task


def _contains(column: InstrumentedAttribute[Any], needle: str) -> ColumnElement[bool]:
    """Case-insensitive substring match; LIKE wildcards in *needle* are literal."""
    escaped = needle.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


# ── contacts ──────────────────────────────────────────────────────────────


class ContactRepo:
    def __init__(self, s: AsyncSession) -> None:
        self._s = s

    async def create(
        self,
        name: str,
        phone_number: str,
        prompt: str,
        relationship: str | None = None,
    ) -> Contact:
        c = Contact(name=name, phone_number=phone_number, relationship=relationship, prompt=prompt)
        self._s.add(c)
        await self._s.flush()
        return c

    async def find(self, name: str | None = None) -> list[Contact]:
        stmt = select(Contact)
        if name:
            stmt = stmt.where(_contains(Contact.name, name))
        stmt = stmt.order_by(Contact.created_at.asc())
        return list(await self._s.scalars(stmt))


# ── tasks ─────────────────────────────────────────────────────────────────


class TaskRepo:
    def __init__(self, s: AsyncSession) -> None:
        self._s = s

    async def create(self, description: str, prompt: str, time: str | None = None) -> Task:
        t = Task(description=description, time=time, prompt=prompt)
        self._s.add(t)
        await self._s.flush()
        return t

    async def find_pending(
        self,
        time: str | None = None,
        keywords: str | None = None,
    ) -> list[Task]:
        """Incomplete tasks, newest first.

        *time* is a substring filter; *keywords* is split on whitespace and
        a task matches when its description contains any of the tokens.
        """
        stmt = select(Task).where(Task.is_completed.is_(False))
        if time:
            stmt = stmt.where(_contains(Task.time, time))
        tokens = keywords.split() if keywords else []
        if tokens:
            stmt = stmt.where(or_(*(_contains(Task.description, tok) for tok in tokens)))
        stmt = stmt.order_by(Task.created_at.desc())
        return list(await self._s.scalars(stmt))
