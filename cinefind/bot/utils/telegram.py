"""Telegram sending helpers."""

from __future__ import annotations

from typing import Any

from aiogram import Bot

from cinefind.logging import logger


async def send_text(bot: Bot, *, chat_id: int, text: str, **kwargs: Any) -> Any | None:
    """Send a plain message; delivery failures are logged, not raised."""

    kwargs.setdefault("parse_mode", None)
    try:
        return await bot.send_message(chat_id=chat_id, text=text, **kwargs)
    except Exception as exc:
        logger.warning(
            "telegram_send_failed",
            chat_id=chat_id,
            error_type=exc.__class__.__name__,
            error=str(exc),
        )
        return None


__all__ = ["send_text"]
