"""Tests for logging configuration and async main bootstrap."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
import structlog
from sqlalchemy.exc import OperationalError

from cinefind import main as main_module
from cinefind.config import SearchSettings, TMDBSettings
from cinefind.domain.models import TrendingEntryModel
from cinefind.logging import configure_logging


def test_configure_logging_outputs_json(capsys):
    configure_logging("INFO")
    logger = structlog.get_logger()
    logger.info("unit-test", foo="bar")
    out = capsys.readouterr().out
    assert "unit-test" in out
    assert "foo" in out


class DummyToken:
    def __init__(self, value: str) -> None:
        self.value = value

    def get_secret_value(self) -> str:
        return self.value


class DummyDispatcher:
    def __init__(self) -> None:
        self.included = []
        self.started = False
        self.start_kwargs = {}

    def include_router(self, router):
        self.included.append(router)

    async def start_polling(self, bot, **kwargs):
        self.started = True
        self.start_kwargs = kwargs


class DummyDatabase:
    def __init__(self, settings) -> None:
        self.settings = settings
        self.schema_created = False
        self.disposed = False

    async def create_schema(self) -> None:
        self.schema_created = True

    async def dispose(self) -> None:
        self.disposed = True

    def session(self):  # pragma: no cover - replaced by DummyTrending
        raise AssertionError("unexpected session use")


class DummyTrending:
    instances: list["DummyTrending"] = []

    def __init__(self, session_scope, tmdb_settings) -> None:
        self.session_scope = session_scope
        self.load_calls: list[int] = []
        DummyTrending.instances.append(self)

    async def load_top(self, limit: int):
        self.load_calls.append(limit)
        return [TrendingEntryModel(id=1, search_term="batman", count=2, movie_id="268")]


@pytest.mark.asyncio
async def test_main_bootstrap(monkeypatch):
    settings = SimpleNamespace(
        telegram_token=DummyToken("token"),
        telegram_proxy=None,
        environment="test",
        log_level="INFO",
        tmdb=TMDBSettings(),
        search=SearchSettings(trending_limit=3),
        database=SimpleNamespace(dsn="sqlite+aiosqlite://"),
    )
    dummy_dispatcher = DummyDispatcher()
    dummy_database = DummyDatabase(settings)
    bot_kwargs = {}

    def fake_bot(*args, **kwargs):
        bot_kwargs.update(kwargs)
        return SimpleNamespace()

    DummyTrending.instances.clear()
    monkeypatch.setattr(main_module, "configure_logging", lambda level: None)
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    monkeypatch.setattr(main_module, "Bot", fake_bot)
    monkeypatch.setattr(main_module, "Dispatcher", lambda: dummy_dispatcher)
    monkeypatch.setattr(main_module, "Database", lambda settings: dummy_database)
    monkeypatch.setattr(main_module, "TrendingService", DummyTrending)
    monkeypatch.setattr(main_module, "setup_routers", lambda: "router")

    await main_module.main()

    assert bot_kwargs["token"] == "token"
    assert dummy_database.schema_created is True
    assert dummy_database.disposed is True
    assert dummy_dispatcher.started is True
    assert dummy_dispatcher.included == ["router"]
    assert DummyTrending.instances[0].load_calls == [3]
    assert dummy_dispatcher.start_kwargs["trending"][0].search_term == "batman"
    assert len(dummy_dispatcher.start_kwargs["sessions"]) == 0


class UnreachableDatabase(DummyDatabase):
    async def create_schema(self) -> None:
        raise OperationalError("CREATE TABLE", {}, ConnectionRefusedError("connection refused"))


@pytest.mark.asyncio
async def test_main_polls_when_store_is_unreachable(monkeypatch):
    settings = SimpleNamespace(
        telegram_token=DummyToken("token"),
        telegram_proxy=None,
        environment="test",
        log_level="INFO",
        tmdb=TMDBSettings(),
        search=SearchSettings(),
        database=SimpleNamespace(dsn="mysql+asyncmy://bot:bot@db/cinefind"),
    )
    dummy_dispatcher = DummyDispatcher()
    dummy_database = UnreachableDatabase(settings)

    DummyTrending.instances.clear()
    monkeypatch.setattr(main_module, "configure_logging", lambda level: None)
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    monkeypatch.setattr(main_module, "Bot", lambda *args, **kwargs: SimpleNamespace())
    monkeypatch.setattr(main_module, "Dispatcher", lambda: dummy_dispatcher)
    monkeypatch.setattr(main_module, "Database", lambda settings: dummy_database)
    monkeypatch.setattr(main_module, "TrendingService", DummyTrending)
    monkeypatch.setattr(main_module, "setup_routers", lambda: "router")

    await main_module.main()

    assert dummy_dispatcher.started is True
    assert dummy_dispatcher.start_kwargs["trending"] == []
    assert DummyTrending.instances[0].load_calls == []
    assert dummy_database.disposed is True
