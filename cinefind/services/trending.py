"""Search-term counters backing the trending view."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cinefind.config import TMDBSettings
from cinefind.db.models.core import TrendingSearch, utc_now
from cinefind.domain.models import Movie, TrendingEntryModel
from cinefind.logging import logger
from cinefind.services.exceptions import TrendingStoreError

SessionScope = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class TrendingRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_term(self, term: str) -> TrendingSearch | None:
        stmt = (
            select(TrendingSearch)
            .where(TrendingSearch.search_term == term)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def increment(self, term: str, *, movie_id: str, poster_url: str | None) -> bool:
        """Atomically bump the counter and refresh the representative movie.

        Returns ``False`` when no row exists for ``term`` yet.
        """

        stmt = (
            update(TrendingSearch)
            .where(TrendingSearch.search_term == term)
            .values(
                count=TrendingSearch.count + 1,
                movie_id=movie_id,
                poster_url=poster_url,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return bool(result.rowcount)

    async def create(self, term: str, *, movie_id: str, poster_url: str | None) -> TrendingSearch:
        entry = TrendingSearch(
            search_term=term,
            count=1,
            movie_id=movie_id,
            poster_url=poster_url,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def record_hit(self, term: str, *, movie_id: str, poster_url: str | None) -> TrendingSearch:
        if await self.increment(term, movie_id=movie_id, poster_url=poster_url):
            entry = await self.get_by_term(term)
            assert entry is not None
            return entry
        return await self.create(term, movie_id=movie_id, poster_url=poster_url)

    async def top(self, limit: int) -> Sequence[TrendingSearch]:
        stmt = (
            select(TrendingSearch)
            .order_by(TrendingSearch.count.desc(), TrendingSearch.id.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()


class TrendingService:
    """Records qualifying searches and reads the most searched terms.

    Each call opens its own session so recording can run detached from the
    search that triggered it.
    """

    def __init__(self, session_scope: SessionScope, tmdb_settings: TMDBSettings | None = None) -> None:
        self._session_scope = session_scope
        self._tmdb = tmdb_settings or TMDBSettings()

    async def record(self, term: str, movie: Movie) -> TrendingEntryModel:
        movie_id = str(movie.id)
        poster_url = self._tmdb.poster_url(movie.poster_path)
        try:
            async with self._session_scope() as session:
                repo = TrendingRepository(session)
                try:
                    entry = await repo.record_hit(term, movie_id=movie_id, poster_url=poster_url)
                    await session.commit()
                except IntegrityError:
                    # Another writer inserted the term first; the row exists now.
                    await session.rollback()
                    entry = await repo.record_hit(term, movie_id=movie_id, poster_url=poster_url)
                    await session.commit()
                model = TrendingEntryModel.model_validate(entry)
        except SQLAlchemyError as exc:
            raise TrendingStoreError(f"Failed to record search for {term!r}: {exc}") from exc

        logger.info("trending_recorded", term=term, count=model.count, movie_id=movie_id)
        return model

    async def load_top(self, limit: int) -> list[TrendingEntryModel]:
        """Return the ``limit`` most searched terms, or an empty list on failure."""

        try:
            async with self._session_scope() as session:
                rows = await TrendingRepository(session).top(limit)
                return [TrendingEntryModel.model_validate(row) for row in rows]
        except SQLAlchemyError as exc:
            logger.error("trending_load_failed", error_type=exc.__class__.__name__, error=str(exc))
            return []


__all__ = ["SessionScope", "TrendingRepository", "TrendingService"]
