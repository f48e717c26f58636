"""Shared pytest fixtures for database-backed service tests."""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cinefind.db.base import Base
from cinefind.db.models import core  # noqa: F401


class _AsyncSessionWrapper:
    def __init__(self, sync_session) -> None:
        self._sync = sync_session

    async def execute(self, *args, **kwargs):
        return self._sync.execute(*args, **kwargs)

    async def get(self, *args, **kwargs):
        return self._sync.get(*args, **kwargs)

    def add(self, obj) -> None:
        self._sync.add(obj)

    def add_all(self, objs) -> None:
        self._sync.add_all(objs)

    async def flush(self) -> None:
        self._sync.flush()

    async def commit(self) -> None:
        self._sync.commit()

    async def rollback(self) -> None:
        self._sync.rollback()

    async def close(self) -> None:
        self._sync.close()


class SessionScope:
    """Stand-in for ``Database.session`` that always yields the same session."""

    def __init__(self, session) -> None:
        self._session = session
        self.opened = 0

    @asynccontextmanager
    async def __call__(self):
        self.opened += 1
        try:
            yield self._session
        except Exception:
            await self._session.rollback()
            raise


@pytest_asyncio.fixture
async def session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    sync_session = SessionLocal()
    try:
        yield _AsyncSessionWrapper(sync_session)
    finally:
        sync_session.close()
        engine.dispose()


@pytest_asyncio.fixture
async def session_scope(session):
    return SessionScope(session)


@asynccontextmanager
async def _unavailable_store():
    raise OperationalError("SELECT 1", {}, Exception("database is locked"))
    yield  # pragma: no cover


@pytest.fixture
def broken_scope():
    """Session scope whose store is unreachable."""

    return _unavailable_store
