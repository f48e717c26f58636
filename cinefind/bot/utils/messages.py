"""Plain-text rendering of search state for chat replies."""

from __future__ import annotations

from typing import Sequence

from cinefind.domain.models import Movie, SearchState, TrendingEntryModel

NO_RESULTS_TEXT = "No movies found."
NO_TRENDING_TEXT = "No trending searches yet."


def format_movie(movie: Movie) -> str:
    title = movie.title or "Untitled"
    parts = [f"{title} ({movie.release_year})" if movie.release_year else title]
    details: list[str] = []
    rating = f"{movie.vote_average:.1f}" if movie.vote_average else "N/A"
    details.append(f"★ {rating}")
    if movie.original_language:
        details.append(movie.original_language.upper())
    parts.append(" · ".join(details))
    return " | ".join(parts)


def format_search_state(state: SearchState, *, limit: int = 10) -> str:
    if state.loading:
        return "Searching…"
    if state.error:
        return state.error
    if not state.movies:
        return NO_RESULTS_TEXT

    heading = f'Results for "{state.query}"' if state.query else "All Movies"
    lines = [heading]
    for index, movie in enumerate(state.movies[:limit], start=1):
        lines.append(f"{index}. {format_movie(movie)}")
    remaining = len(state.movies) - limit
    if remaining > 0:
        lines.append(f"…and {remaining} more")
    return "\n".join(lines)


def format_trending(entries: Sequence[TrendingEntryModel]) -> str:
    if not entries:
        return NO_TRENDING_TEXT
    lines = ["Trending Movies"]
    for rank, entry in enumerate(entries, start=1):
        line = f"{rank}. {entry.search_term} ({entry.count})"
        if entry.poster_url:
            line = f"{line} {entry.poster_url}"
        lines.append(line)
    return "\n".join(lines)


__all__ = ["NO_RESULTS_TEXT", "NO_TRENDING_TEXT", "format_movie", "format_search_state", "format_trending"]
