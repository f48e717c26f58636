"""Telegram handlers feeding the search sessions."""

from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from cinefind.bot.sessions import SearchSessionRegistry
from cinefind.bot.utils.messages import format_trending
from cinefind.domain.models import TrendingEntryModel
from cinefind.logging import logger

router = Router()

GREETING = (
    "Find movies you'll enjoy without the hassle.\n"
    "Type a title to search, /popular for the most popular movies, "
    "/trending for what others search most."
)


@router.message(CommandStart())
async def handle_start(message: Message, sessions: SearchSessionRegistry) -> None:
    await message.answer(GREETING, parse_mode=None)
    session = sessions.get(message.chat.id)
    if not session.started:
        await session.start()


@router.message(Command("trending"))
async def handle_trending(message: Message, trending: list[TrendingEntryModel]) -> None:
    await message.answer(format_trending(trending), parse_mode=None)


@router.message(Command("popular"))
async def handle_popular(message: Message, sessions: SearchSessionRegistry) -> None:
    sessions.get(message.chat.id).update_query("")


@router.message(F.text & ~F.text.startswith("/"))
async def handle_query(message: Message, sessions: SearchSessionRegistry) -> None:
    logger.debug("search_input", chat_id=message.chat.id, length=len(message.text))
    sessions.get(message.chat.id).update_query(message.text)


@router.edited_message(F.text & ~F.text.startswith("/"))
async def handle_query_edit(message: Message, sessions: SearchSessionRegistry) -> None:
    sessions.get(message.chat.id).update_query(message.text)


__all__ = ["handle_popular", "handle_query", "handle_query_edit", "handle_start", "handle_trending", "router"]
