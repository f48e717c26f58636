"""Application entrypoint."""

from __future__ import annotations

import asyncio

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.session.aiohttp import AiohttpSession
from sqlalchemy.exc import SQLAlchemyError

from cinefind.bot.routers import setup_routers
from cinefind.bot.sessions import SearchSessionRegistry, telegram_session_factory
from cinefind.config import get_settings
from cinefind.db.session import Database
from cinefind.domain.models import TrendingEntryModel
from cinefind.logging import configure_logging, logger
from cinefind.services.metadata import MetadataProvider
from cinefind.services.trending import TrendingService
from cinefind.utils.tasks import DetachedTasks


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    database = Database(settings=settings)
    store_ready = True
    try:
        await database.create_schema()
    except (SQLAlchemyError, OSError) as exc:
        # Search keeps working; trending writes fail and are logged per task.
        store_ready = False
        logger.error(
            "trending_store_unavailable",
            error_type=exc.__class__.__name__,
            error=str(exc),
        )

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(token=settings.telegram_token.get_secret_value(), session=session)
    dp = Dispatcher()
    dp.include_router(setup_routers())

    tasks = DetachedTasks()
    trending_service = TrendingService(database.session, settings.tmdb)
    trending: list[TrendingEntryModel] = []
    if store_ready:
        # Loaded once; a failed read leaves the trending view empty.
        trending = await trending_service.load_top(settings.search.trending_limit)
    logger.info("trending_loaded", entries=len(trending))

    async with httpx.AsyncClient() as http_client:
        provider = MetadataProvider(http_client, settings.tmdb)
        sessions = SearchSessionRegistry(
            telegram_session_factory(
                bot,
                source=provider,
                recorder=trending_service,
                tasks=tasks,
                settings=settings.search,
            ),
            max_sessions=settings.search.max_sessions,
        )
        logger.info("bot_starting", environment=settings.environment)
        try:
            await dp.start_polling(bot, sessions=sessions, trending=trending)
        finally:
            sessions.close()
            await tasks.drain()
            await database.dispose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
