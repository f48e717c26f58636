"""Tests for chat reply formatting."""

from __future__ import annotations

from cinefind.bot.utils.messages import (
    NO_RESULTS_TEXT,
    NO_TRENDING_TEXT,
    format_movie,
    format_search_state,
    format_trending,
)
from cinefind.domain.models import Movie, SearchState, TrendingEntryModel


def test_format_movie_includes_year_rating_and_language():
    movie = Movie(
        id=1,
        title="The Dark Knight",
        vote_average=8.512,
        original_language="en",
        release_date="2008-07-16",
    )

    assert format_movie(movie) == "The Dark Knight (2008) | ★ 8.5 · EN"


def test_format_movie_handles_missing_fields():
    assert format_movie(Movie(id=2)) == "Untitled | ★ N/A"


def test_format_search_state_lists_results_with_limit():
    movies = tuple(Movie(id=i, title=f"Film {i}") for i in range(1, 5))
    state = SearchState(query="film", movies=movies)

    text = format_search_state(state, limit=2)

    assert text.splitlines() == [
        'Results for "film"',
        "1. Film 1 | ★ N/A",
        "2. Film 2 | ★ N/A",
        "…and 2 more",
    ]


def test_format_search_state_discovery_heading():
    state = SearchState(movies=(Movie(id=1, title="Popular"),))
    assert format_search_state(state).startswith("All Movies")


def test_format_search_state_error_and_empty():
    assert format_search_state(SearchState(error="Error fetching movies")) == "Error fetching movies"
    assert format_search_state(SearchState(query="zzz")) == NO_RESULTS_TEXT
    assert format_search_state(SearchState(loading=True)) == "Searching…"


def test_format_trending_ranks_entries():
    entries = [
        TrendingEntryModel(id=1, search_term="batman", count=4, movie_id="268", poster_url="https://img/p.jpg"),
        TrendingEntryModel(id=2, search_term="dune", count=2, movie_id="438631"),
    ]

    assert format_trending(entries).splitlines() == [
        "Trending Movies",
        "1. batman (4) https://img/p.jpg",
        "2. dune (2)",
    ]
    assert format_trending([]) == NO_TRENDING_TEXT
