"""Per-chat search sessions."""

from __future__ import annotations

from collections import OrderedDict
from typing import Callable

from aiogram import Bot

from cinefind.bot.utils.messages import format_search_state
from cinefind.bot.utils.telegram import send_text
from cinefind.config import SearchSettings
from cinefind.domain.models import SearchState
from cinefind.logging import logger
from cinefind.services.search import MovieSource, QueryExecutor, SearchRecorder, SearchSession
from cinefind.utils.tasks import DetachedTasks

SessionFactory = Callable[[int], SearchSession]


class SearchSessionRegistry:
    """Lazily creates one ``SearchSession`` per chat and keeps it for reuse.

    At most ``max_sessions`` are kept; the least recently used chat is closed
    and forgotten when a new one would exceed the cap.
    """

    def __init__(self, factory: SessionFactory, *, max_sessions: int | None = None) -> None:
        self._factory = factory
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[int, SearchSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, chat_id: int) -> SearchSession:
        session = self._sessions.get(chat_id)
        if session is not None:
            self._sessions.move_to_end(chat_id)
            return session
        session = self._factory(chat_id)
        self._sessions[chat_id] = session
        if self._max_sessions is not None:
            while len(self._sessions) > self._max_sessions:
                evicted_id, evicted = self._sessions.popitem(last=False)
                evicted.close()
                logger.debug("search_session_evicted", chat_id=evicted_id)
        return session

    def close(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()


def telegram_session_factory(
    bot: Bot,
    *,
    source: MovieSource,
    recorder: SearchRecorder | None,
    tasks: DetachedTasks,
    settings: SearchSettings,
) -> SessionFactory:
    """Build sessions that reply with the rendered state after every search."""

    def factory(chat_id: int) -> SearchSession:
        async def publish(state: SearchState) -> None:
            text = format_search_state(state, limit=settings.result_limit)
            await send_text(bot, chat_id=chat_id, text=text)

        executor = QueryExecutor(source, recorder, tasks=tasks)
        return SearchSession(
            executor,
            debounce_seconds=settings.debounce_seconds,
            on_change=publish,
        )

    return factory


__all__ = ["SearchSessionRegistry", "SessionFactory", "telegram_session_factory"]
