"""Async SQLAlchemy session management."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cinefind.config import CineFindSettings, get_settings
from cinefind.db.base import Base
from cinefind.logging import logger

# Registers the mapped tables on Base.metadata.
from cinefind.db.models import core as _models  # noqa: F401


class Database:
    """Lazy SQLAlchemy engine/session factory wrapper."""

    def __init__(self, settings: CineFindSettings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    def _engine_options(self) -> dict[str, Any]:
        db_cfg = self.settings.database
        options: dict[str, Any] = {"echo": db_cfg.echo}
        if not db_cfg.is_sqlite:
            options.update(
                pool_size=db_cfg.pool_size,
                max_overflow=db_cfg.max_overflow,
                pool_recycle=db_cfg.pool_recycle,
                pool_pre_ping=db_cfg.pool_pre_ping,
            )
        return options

    def _ensure_engine(self) -> None:
        if self._engine is None:
            db_cfg = self.settings.database
            self._engine = create_async_engine(db_cfg.dsn, **self._engine_options())
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.info("db_engine_initialized", dsn=db_cfg.dsn)

    @property
    def engine(self) -> AsyncEngine:
        self._ensure_engine()
        assert self._engine is not None
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        self._ensure_engine()
        assert self._session_factory is not None
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        factory = self.session_factory
        async with factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("db_schema_ready")

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None


def get_database(settings: CineFindSettings | None = None) -> Database:
    return Database(settings=settings)


__all__ = ["Database", "get_database"]
