"""Async database engine & session factory.

One ``Database`` is built when the application starts, kept on
``app.state`` and disposed on shutdown. Requests borrow sessions from it
through the ``get_session`` dependency.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Request
from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from speech_intent.storage.models import Base


class Database:
    def __init__(self, url: str, *, echo: bool = False) -> None:
        kwargs: dict[str, object] = {"echo": echo, "pool_pre_ping": True}
        if make_url(url).get_backend_name() != "sqlite":
            kwargs["pool_recycle"] = 1800
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **kwargs)
        self._session_factory = async_sessionmaker(bind=self.engine, expire_on_commit=False)

    async def connect(self) -> None:
        """Verify connectivity and ensure the schema exists.

        Any failure propagates: an unreachable store must stop startup.
        """
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Connected to database ({self.engine.url.render_as_string(hide_password=True)})")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Scoped session: commit on success, roll back on error."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency – yields a scoped session per request."""
    db: Database = request.app.state.db
    async with db.session() as session:
        yield session
