"""Search orchestration: settled queries in, display state out."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol

from cinefind.domain.models import ErrorKind, Movie, SearchOutcome, SearchState, TrendingEntryModel
from cinefind.logging import logger
from cinefind.services.debounce import Debouncer
from cinefind.services.exceptions import FetchError, ProviderError
from cinefind.utils.tasks import DetachedTasks

FETCH_ERROR_MESSAGE = "Error fetching movies"

StateListener = Callable[[SearchState], Awaitable[Any]]


class MovieSource(Protocol):
    async def fetch_movies(self, query: str) -> list[Movie]: ...


class SearchRecorder(Protocol):
    async def record(self, term: str, movie: Movie) -> TrendingEntryModel: ...


def normalize_query(text: str | None) -> str:
    return (text or "").strip()


class QueryExecutor:
    """Runs one provider request per settled query and owns the display state.

    Each ``execute`` call takes the next generation number. Only the newest
    generation may write ``state``; older calls still run to completion but
    their outcome comes back flagged as superseded.
    """

    def __init__(
        self,
        source: MovieSource,
        recorder: SearchRecorder | None = None,
        *,
        tasks: DetachedTasks | None = None,
    ) -> None:
        self._source = source
        self._recorder = recorder
        self._tasks = tasks or DetachedTasks()
        self._generation = 0
        self._state = SearchState()

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _apply(self, generation: int, state: SearchState) -> bool:
        if not self.is_current(generation):
            return False
        self._state = state
        return True

    async def execute(self, query: str) -> SearchOutcome:
        query = normalize_query(query)
        self._generation += 1
        generation = self._generation
        self._apply(generation, self._state.begin(query, generation))
        log = logger.bind(query=query, generation=generation)

        outcome: SearchOutcome | None = None
        try:
            try:
                movies = tuple(await self._source.fetch_movies(query))
            except ProviderError as exc:
                log.info("search_provider_error", message=exc.message)
                outcome = SearchOutcome(
                    query=query,
                    generation=generation,
                    error_kind=ErrorKind.PROVIDER,
                    error=exc.message,
                )
            except FetchError as exc:
                log.warning("search_fetch_failed", status_code=exc.status_code, error=exc.message)
                outcome = SearchOutcome(
                    query=query,
                    generation=generation,
                    error_kind=ErrorKind.FETCH,
                    error=FETCH_ERROR_MESSAGE,
                )
            except Exception:
                log.exception("search_unexpected_error")
                outcome = SearchOutcome(
                    query=query,
                    generation=generation,
                    error_kind=ErrorKind.FETCH,
                    error=FETCH_ERROR_MESSAGE,
                )
            else:
                outcome = SearchOutcome(query=query, generation=generation, movies=movies)
                if query and movies:
                    self._schedule_record(query, movies[0])

            if outcome.ok:
                applied = self._apply(generation, self._state.succeed(outcome.movies))
            else:
                applied = self._apply(generation, self._state.fail(outcome.error or FETCH_ERROR_MESSAGE))
            if not applied:
                log.debug("search_superseded", latest_generation=self._generation)
                outcome = outcome.model_copy(update={"superseded": True})
            return outcome
        finally:
            if self.is_current(generation) and self._state.loading:
                self._state = self._state.finish()

    def _schedule_record(self, query: str, top_movie: Movie) -> None:
        if self._recorder is None:
            return
        self._tasks.spawn(
            self._recorder.record(query, top_movie),
            name=f"trending-record:{query}",
        )


class SearchSession:
    """One user's search view: debounced input feeding a ``QueryExecutor``."""

    def __init__(
        self,
        executor: QueryExecutor,
        *,
        debounce_seconds: float,
        on_change: StateListener | None = None,
    ) -> None:
        self.executor = executor
        self._on_change = on_change
        self._debouncer: Debouncer[str] = Debouncer(debounce_seconds, self._handle_settled)
        self._started = False

    @property
    def state(self) -> SearchState:
        return self.executor.state

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> SearchOutcome:
        """Show the default discovery listing, as on first load."""

        self._started = True
        return await self._run("")

    def update_query(self, text: str | None) -> None:
        self._debouncer.push(normalize_query(text))

    async def wait_idle(self) -> None:
        await self._debouncer.wait()

    def close(self) -> None:
        self._debouncer.cancel()

    async def _handle_settled(self, query: str) -> None:
        state = self.executor.state
        if self._started and query == state.query and state.error is None:
            logger.debug("search_query_unchanged", query=query)
            if not state.loading:
                await self._publish(query)
            return
        self._started = True
        await self._run(query)

    async def _run(self, query: str) -> SearchOutcome:
        outcome = await self.executor.execute(query)
        if not outcome.superseded:
            await self._publish(query)
        return outcome

    async def _publish(self, query: str) -> None:
        if self._on_change is None:
            return
        try:
            await self._on_change(self.executor.state)
        except Exception:
            logger.exception("search_listener_failed", query=query)


__all__ = [
    "FETCH_ERROR_MESSAGE",
    "MovieSource",
    "QueryExecutor",
    "SearchRecorder",
    "SearchSession",
    "normalize_query",
]
