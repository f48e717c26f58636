"""Pydantic models shared across service and bot layers."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Movie(BaseModel):
    """Provider record passed through untouched apart from a few known fields."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int | str
    title: str | None = None
    poster_path: str | None = None
    vote_average: float | None = None
    original_language: str | None = None
    release_date: str | None = None

    @property
    def release_year(self) -> str | None:
        if not self.release_date:
            return None
        return self.release_date.split("-", 1)[0] or None


class TrendingEntryModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    search_term: str
    count: int = Field(ge=1)
    movie_id: str
    poster_url: str | None = None
    updated_at: datetime | None = None


class ErrorKind(str, Enum):
    FETCH = "fetch"
    PROVIDER = "provider"


class SearchState(BaseModel):
    """Snapshot of what a search view displays.

    Instances are immutable; every change goes through one of the transition
    methods so a state can only be produced by a legal step.
    """

    model_config = ConfigDict(frozen=True)

    query: str = ""
    generation: int = 0
    movies: tuple[Movie, ...] = ()
    loading: bool = False
    error: str | None = None

    def begin(self, query: str, generation: int) -> SearchState:
        return self.model_copy(
            update={"query": query, "generation": generation, "loading": True, "error": None}
        )

    def succeed(self, movies: tuple[Movie, ...]) -> SearchState:
        return self.model_copy(update={"movies": movies, "loading": False, "error": None})

    def fail(self, message: str) -> SearchState:
        return self.model_copy(update={"movies": (), "loading": False, "error": message})

    def finish(self) -> SearchState:
        return self.model_copy(update={"loading": False})


class SearchOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str
    generation: int
    movies: tuple[Movie, ...] = ()
    error_kind: ErrorKind | None = None
    error: str | None = None
    superseded: bool = False

    @property
    def ok(self) -> bool:
        return self.error_kind is None


__all__ = [
    "ErrorKind",
    "Movie",
    "SearchOutcome",
    "SearchState",
    "TrendingEntryModel",
]
