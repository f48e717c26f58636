"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    dsn: str = Field(
        default="sqlite+aiosqlite:///./cinefind.db",
        description="SQLAlchemy async DSN holding the trending counters.",
    )
    pool_size: int = Field(default=5, ge=1, le=50)
    max_overflow: int = Field(default=10, ge=0, le=100)
    echo: bool = False
    pool_recycle: int = Field(default=3600, ge=30)
    pool_pre_ping: bool = Field(default=True)

    @property
    def is_sqlite(self) -> bool:
        return self.dsn.startswith("sqlite")


class TMDBSettings(BaseModel):
    api_key: SecretStr | None = Field(
        default=None,
        description="TMDB v4 read access token, sent as a bearer token.",
    )
    base_url: AnyHttpUrl = Field(default="https://api.themoviedb.org/3")
    image_base_url: AnyHttpUrl = Field(default="https://image.tmdb.org/t/p")
    poster_size: str = Field(default="w500", min_length=1)
    language: str = Field(default="en-US", min_length=2)
    request_timeout_seconds: float | None = Field(default=None, gt=0, le=300)

    @field_validator("request_timeout_seconds", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def api_url(self, path: str) -> str:
        return f"{str(self.base_url).rstrip('/')}/{path.lstrip('/')}"

    def poster_url(self, poster_path: str | None) -> str | None:
        if not poster_path:
            return None
        base = str(self.image_base_url).rstrip("/")
        return f"{base}/{self.poster_size}/{poster_path.lstrip('/')}"


class SearchSettings(BaseModel):
    debounce_ms: int = Field(default=500, ge=0, le=10_000)
    trending_limit: int = Field(default=5, ge=1, le=50)
    result_limit: int = Field(default=10, ge=1, le=20)
    max_sessions: int = Field(default=1000, ge=1)

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


class CineFindSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CINEFIND_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    telegram_token: SecretStr
    telegram_proxy: str | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    tmdb: TMDBSettings = Field(default_factory=TMDBSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)


@lru_cache
def get_settings() -> CineFindSettings:
    """Return cached settings instance."""

    return CineFindSettings()  # type: ignore[call-arg]


__all__ = [
    "CineFindSettings",
    "DatabaseSettings",
    "SearchSettings",
    "TMDBSettings",
    "get_settings",
]
