"""TMDB client covering the discovery listing and title search."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from cinefind.config import TMDBSettings
from cinefind.domain.models import Movie
from cinefind.logging import logger
from cinefind.services.exceptions import DEFAULT_FETCH_FAILURE, FetchError, ProviderError

DISCOVER_PATH = "/discover/movie"
SEARCH_PATH = "/search/movie"


class MetadataProvider:
    """Thin async wrapper around the two TMDB listing endpoints.

    An empty query maps to the popularity-sorted discovery listing, anything
    else to a title search. Every failure is raised as a ``MetadataError``
    subclass so callers only need to distinguish transport from provider
    failures.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: TMDBSettings | None = None) -> None:
        self._client = http_client
        self._settings = settings or TMDBSettings()

    def build_request(self, query: str) -> tuple[str, dict[str, str]]:
        """Return the endpoint path and query parameters for ``query``."""

        if not query:
            return DISCOVER_PATH, {
                "include_adult": "false",
                "include_video": "false",
                "language": self._settings.language,
                "page": "1",
                "sort_by": "popularity.desc",
            }
        return SEARCH_PATH, {
            "include_adult": "false",
            "language": self._settings.language,
            "page": "1",
            "query": query,
        }

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        if self._settings.api_key is not None:
            headers["Authorization"] = f"Bearer {self._settings.api_key.get_secret_value()}"
        return headers

    async def fetch_movies(self, query: str) -> list[Movie]:
        path, params = self.build_request(query)
        try:
            response = await self._client.get(
                self._settings.api_url(path),
                params=params,
                headers=self._headers(),
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            logger.warning("tmdb_http_error", path=path, status_code=status_code)
            raise FetchError(status_code=status_code) from exc
        except httpx.RequestError as exc:
            logger.warning("tmdb_request_error", path=path, error=str(exc))
            raise FetchError() from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("tmdb_invalid_json", path=path, status_code=response.status_code)
            raise FetchError(status_code=response.status_code) from exc

        return self._parse_listing(data)

    @staticmethod
    def _failure_message(data: dict[str, Any]) -> str | None:
        """Return the provider's failure text, or ``None`` when the payload is a success."""

        if data.get("Response") == "False":
            return data.get("Error") or DEFAULT_FETCH_FAILURE
        if data.get("success") is False:
            return data.get("status_message") or DEFAULT_FETCH_FAILURE
        return None

    def _parse_listing(self, data: Any) -> list[Movie]:
        if not isinstance(data, dict):
            raise ProviderError()

        failure = self._failure_message(data)
        if failure is not None:
            logger.info("tmdb_logical_failure", message=failure)
            raise ProviderError(failure)

        raw_results = data.get("results") or []
        if not isinstance(raw_results, list):
            raise ProviderError()

        movies: list[Movie] = []
        for index, item in enumerate(raw_results):
            try:
                movies.append(Movie.model_validate(item))
            except ValidationError as exc:
                # One malformed record only drops itself.
                logger.warning("tmdb_invalid_result", index=index, errors=exc.error_count())
        return movies


__all__ = ["DISCOVER_PATH", "SEARCH_PATH", "MetadataProvider"]
