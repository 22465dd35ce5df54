"""Client for the parts of The Movie Database (TMDB) API the sync reads."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..errors import TMDBError
from ..models import DiscoverPage, Genre, MovieDetail, MovieRecord, Video
from .http import request_json

logger = logging.getLogger(__name__)


class TMDBClient:
    """Thin wrapper around the TMDB v3 HTTP API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        if not settings.tmdb_api_key:
            raise ValueError("TMDB API key is required when initialising TMDBClient")
        self._settings = settings
        self._client = http_client

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        query: dict[str, Any] = {"api_key": self._settings.tmdb_api_key}
        if params:
            query.update(params)
        return await request_json(
            self._client,
            "GET",
            path,
            service="TMDB",
            error_cls=TMDBError,
            max_retries=self._settings.http_max_retries,
            params=query,
        )

    async def discover_movies(self, page: int) -> DiscoverPage:
        """Return ``page`` of the discover listing."""

        payload = await self._get("/discover/movie", {"page": page})
        if not isinstance(payload, dict):
            raise TMDBError(f"Unexpected TMDB discover response for page {page}")

        raw_results = payload.get("results") or []
        movies: list[MovieRecord] = []
        for entry in raw_results:
            if not isinstance(entry, dict):
                continue
            try:
                movies.append(MovieRecord.model_validate(entry))
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed TMDB record on page %s (id=%s): %s",
                    page,
                    entry.get("id"),
                    exc.errors()[0].get("msg") if exc.errors() else exc,
                )
        return DiscoverPage(
            page=payload.get("page") or page,
            results=movies,
            total_pages=payload.get("total_pages"),
            total_results=payload.get("total_results"),
        )

    async def fetch_movie_detail(self, movie_id: int) -> MovieDetail:
        """Fetch a movie with its embedded video list."""

        payload = await self._get(
            f"/movie/{movie_id}", {"append_to_response": "videos"}
        )
        try:
            return MovieDetail.model_validate(payload)
        except ValidationError as exc:
            raise TMDBError(f"Unexpected TMDB detail response for movie {movie_id}") from exc

    async def find_trailer(self, movie_id: int) -> Video | None:
        """Return the first trailer attached to ``movie_id``, if any."""

        detail = await self.fetch_movie_detail(movie_id)
        return detail.first_trailer()

    async def fetch_genres(self) -> list[Genre]:
        """Return TMDB's full list of movie genres."""

        payload = await self._get("/genre/movie/list")
        raw_genres = payload.get("genres") if isinstance(payload, dict) else None
        if not isinstance(raw_genres, list):
            raise TMDBError("Unexpected TMDB genre list response")
        return [Genre.model_validate(entry) for entry in raw_genres if isinstance(entry, dict)]
