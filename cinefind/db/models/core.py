"""SQLAlchemy models for search analytics."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cinefind.db.base import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TrendingSearch(Base):
    __tablename__ = "trending_searches"
    __table_args__ = (
        UniqueConstraint("search_term", name="uq_trending_searches_search_term"),
        Index("ix_trending_searches_count", "count"),
    )

    search_term: Mapped[str] = mapped_column(String(255), nullable=False)
    count: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    movie_id: Mapped[str] = mapped_column(String(64), nullable=False)
    poster_url: Mapped[str | None] = mapped_column(String(512))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


__all__ = ["TrendingSearch", "utc_now"]
