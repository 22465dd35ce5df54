"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, HttpUrl, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="moviesync", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    tmdb_api_key: str | None = Field(
        default=None,
        alias="MOVIE_API_KEY",
        validation_alias=AliasChoices("MOVIE_API_KEY", "TMDB_API_KEY"),
    )
    webflow_api_token: str | None = Field(
        default=None,
        alias="WF_API_KEY",
        validation_alias=AliasChoices("WF_API_KEY", "WEBFLOW_API_TOKEN"),
    )

    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    webflow_api_url: HttpUrl = Field(
        default="https://api.webflow.com", alias="WEBFLOW_API_URL"
    )

    movie_collection_id: str = Field(
        default="6353176f2cf2501b7755dae3", alias="MOVIE_COLLECTION_ID"
    )
    genre_collection_id: str = Field(
        default="6348398efba7fae203374c15", alias="GENRE_COLLECTION_ID"
    )

    start_page: int = Field(default=1, alias="START_PAGE", ge=1)
    max_page_count: int = Field(default=401, alias="MAX_PAGE_COUNT", ge=1)

    poster_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w300", alias="POSTER_BASE_URL"
    )
    backdrop_base_url: str = Field(
        default="https://image.tmdb.org/t/p/original", alias="BACKDROP_BASE_URL"
    )
    trailer_url_prefix: str = Field(
        default="https://www.youtube.com/watch?v=", alias="TRAILER_URL_PREFIX"
    )

    rate_limit_max_concurrent: int = Field(
        default=2, alias="RATE_LIMIT_MAX_CONCURRENT", ge=1, le=50
    )
    rate_limit_min_interval_ms: int = Field(
        default=1_000, alias="RATE_LIMIT_MIN_INTERVAL_MS", ge=0
    )
    # Webflow creates are POSTs and only retried on 429, never on 5xx or
    # transport errors, since those may already have created the item.
    http_max_retries: int = Field(default=0, alias="HTTP_MAX_RETRIES", ge=0, le=10)

    run_mode: Literal["sync", "seed-genres", "server"] = Field(
        default="sync", alias="RUN_MODE"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("tmdb_api_key", "webflow_api_token", mode="before")
    @classmethod
    def _strip_blank(cls, value: object) -> object:
        """Treat blank secrets as missing."""

        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value

    @model_validator(mode="after")
    def _check_page_bounds(self) -> "Settings":
        """Ensure the first page sits below the exclusive upper bound."""

        if self.start_page >= self.max_page_count:
            raise ValueError("START_PAGE must be lower than MAX_PAGE_COUNT")
        return self

    @property
    def rate_limit_min_interval(self) -> float:
        """Minimum spacing between throttled work units, in seconds."""

        return self.rate_limit_min_interval_ms / 1000

    @property
    def page_numbers(self) -> range:
        """Return the listing pages a sync run requests, in order."""

        return range(self.start_page, self.max_page_count)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]
