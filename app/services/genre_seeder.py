"""One-off bootstrap that creates a Webflow genre item for every TMDB genre."""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Callable

from ..config import Settings
from ..errors import WebflowError
from ..models import CreatedItem, GenreFields
from .rate_limiter import RateLimiter
from .tmdb import TMDBClient
from .webflow import WebflowClient

logger = logging.getLogger(__name__)


class GenreSeeder:
    """Copies TMDB's movie genre list into the Webflow genres collection.

    New genre items are created as drafts. Their Webflow ids then have to be
    copied into :data:`app.genres.MOVIE_GENRES` by hand.
    """

    def __init__(
        self,
        settings: Settings,
        tmdb_client: TMDBClient,
        webflow_client: WebflowClient,
        *,
        limiter_factory: Callable[[], RateLimiter] | None = None,
    ):
        self._settings = settings
        self._tmdb = tmdb_client
        self._webflow = webflow_client
        self._limiter_factory = limiter_factory or partial(
            RateLimiter,
            max_concurrent=settings.rate_limit_max_concurrent,
            min_interval=settings.rate_limit_min_interval,
        )

    async def seed(self) -> list[CreatedItem]:
        genres = await self._tmdb.fetch_genres()
        logger.info("Seeding %s TMDB genres into Webflow", len(genres))

        async with self._limiter_factory() as limiter:
            futures = [
                limiter.schedule(
                    self._webflow.create_item,
                    self._settings.genre_collection_id,
                    GenreFields(name=genre.name).to_webflow(),
                )
                for genre in genres
            ]
            results = await asyncio.gather(*futures, return_exceptions=True)

        created: list[CreatedItem] = []
        for genre, result in zip(genres, results):
            if isinstance(result, WebflowError):
                logger.warning("Failed to create genre %s: %s", genre.name, result)
                continue
            if isinstance(result, BaseException):
                raise result
            logger.info("Created genre %s (%s)", result.display_name(), result.id)
            created.append(result)
        return created
