from aiogram import Router

from cinefind.bot.routers import search


def setup_routers() -> Router:
    router = Router()
    router.include_router(search.router)
    return router


__all__ = ["setup_routers"]
