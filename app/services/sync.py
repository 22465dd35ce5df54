"""Coordinates TMDB ingestion with Webflow item creation."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from functools import partial
from typing import Any, Callable, Literal

from ..config import Settings
from ..errors import SyncAlreadyRunningError, TMDBError, WebflowError
from ..genres import GenreLookup
from ..mapping import MovieMapper
from ..models import CreatedItem, DiscoverPage, MovieFields, MovieRecord
from .rate_limiter import RateLimiter
from .tmdb import TMDBClient
from .webflow import WebflowClient

logger = logging.getLogger(__name__)

UnitOutcome = Literal[
    "created",
    "skipped_missing_images",
    "skipped_missing_trailer",
    "failed_detail",
    "failed_write",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class WriteOutcome:
    """Result of a single create-item call against Webflow."""

    item: CreatedItem | None = None
    error: WebflowError | None = None

    @property
    def created(self) -> bool:
        return self.item is not None


@dataclass(slots=True)
class SyncReport:
    """Counters describing one sync run."""

    pages_fetched: int = 0
    dispatched: int = 0
    created: int = 0
    skipped_missing_images: int = 0
    skipped_missing_trailer: int = 0
    failed_details: int = 0
    failed_writes: int = 0
    errors: int = 0
    aborted: bool = False
    started_at: datetime = field(default_factory=_utcnow)
    finished_at: datetime | None = None

    def record(self, outcome: UnitOutcome) -> None:
        if outcome == "created":
            self.created += 1
        elif outcome == "skipped_missing_images":
            self.skipped_missing_images += 1
        elif outcome == "skipped_missing_trailer":
            self.skipped_missing_trailer += 1
        elif outcome == "failed_detail":
            self.failed_details += 1
        elif outcome == "failed_write":
            self.failed_writes += 1

    @property
    def skipped(self) -> int:
        return self.skipped_missing_images + self.skipped_missing_trailer

    def to_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["started_at"] = self.started_at.isoformat()
        payload["finished_at"] = (
            self.finished_at.isoformat() if self.finished_at else None
        )
        return payload


class MovieSyncService:
    """Pages through TMDB and creates a Webflow item for every usable movie."""

    def __init__(
        self,
        settings: Settings,
        tmdb_client: TMDBClient,
        webflow_client: WebflowClient,
        *,
        genre_lookup: GenreLookup | None = None,
        mapper: MovieMapper | None = None,
        limiter_factory: Callable[[], RateLimiter] | None = None,
    ):
        self._settings = settings
        self._tmdb = tmdb_client
        self._webflow = webflow_client
        self._genres = genre_lookup or GenreLookup()
        self._mapper = mapper or MovieMapper(settings)
        self._limiter_factory = limiter_factory or partial(
            RateLimiter,
            max_concurrent=settings.rate_limit_max_concurrent,
            min_interval=settings.rate_limit_min_interval,
        )
        self._running = False
        self._task: asyncio.Task[SyncReport | None] | None = None
        self._last_report: SyncReport | None = None
        self._current_report: SyncReport | None = None

    @property
    def is_running(self) -> bool:
        return self._running or (self._task is not None and not self._task.done())

    @property
    def last_report(self) -> SyncReport | None:
        return self._last_report

    @property
    def current_report(self) -> SyncReport | None:
        return self._current_report

    async def run(self) -> SyncReport:
        """Run one full sync pass and return its report.

        Pages are fetched one after another. Each movie is handed to the rate
        limiter without waiting for it, so page fetches never block on item
        creation. A failed page request aborts the run and is re-raised once
        the queued work has been cancelled.
        """

        if self._running:
            raise SyncAlreadyRunningError("A sync run is already in progress")
        self._running = True
        report = SyncReport()
        self._current_report = report
        pages = self._settings.page_numbers
        logger.info(
            "Starting movie sync for pages %s-%s", pages.start, pages.stop - 1
        )
        try:
            async with self._limiter_factory() as limiter:
                for page in pages:
                    listing = await self._fetch_page(page)
                    report.pages_fetched += 1
                    for movie in listing.results:
                        future = limiter.schedule(self.create_movie, movie)
                        future.add_done_callback(
                            partial(self._record_outcome, report, movie)
                        )
                        report.dispatched += 1
        except BaseException:
            report.aborted = True
            raise
        finally:
            report.finished_at = _utcnow()
            self._last_report = report
            self._current_report = None
            self._running = False
            self._log_summary(report)
        return report

    async def _fetch_page(self, page: int) -> DiscoverPage:
        try:
            listing = await self._tmdb.discover_movies(page)
        except TMDBError as exc:
            logger.error("Fetching TMDB discover page %s failed, aborting: %s", page, exc)
            raise
        logger.debug("Fetched TMDB page %s with %s movies", page, len(listing.results))
        return listing

    async def create_movie(self, movie: MovieRecord) -> UnitOutcome:
        """Enrich, map and write a single movie."""

        if not movie.has_artwork():
            logger.debug("Skipping %s (%s): missing poster or backdrop", movie.title, movie.id)
            return "skipped_missing_images"

        try:
            trailer = await self._tmdb.find_trailer(movie.id)
        except TMDBError as exc:
            logger.warning(
                "Could not fetch details for %s (%s): %s", movie.title, movie.id, exc
            )
            return "failed_detail"
        if trailer is None or not trailer.key:
            logger.debug("Skipping %s (%s): no trailer", movie.title, movie.id)
            return "skipped_missing_trailer"

        genre_references = self._genres.resolve(movie.genre_ids)
        fields = self._mapper.build_fields(
            movie, trailer_key=trailer.key, genre_references=genre_references
        )
        outcome = await self.write_movie(fields)
        return "created" if outcome.created else "failed_write"

    async def write_movie(self, fields: MovieFields) -> WriteOutcome:
        """Create the Webflow item, logging rather than raising on failure."""

        try:
            item = await self._webflow.create_item(
                self._settings.movie_collection_id, fields.to_webflow()
            )
        except WebflowError as exc:
            logger.warning("Failed to create Webflow item for %s: %s", fields.name, exc)
            return WriteOutcome(error=exc)
        logger.info("Created %s", item.display_name())
        return WriteOutcome(item=item)

    @staticmethod
    def _record_outcome(
        report: SyncReport, movie: MovieRecord, future: asyncio.Future[Any]
    ) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            report.errors += 1
            logger.error(
                "Unexpected failure while syncing %s (%s)",
                movie.title,
                movie.id,
                exc_info=exc,
            )
            return
        report.record(future.result())

    @staticmethod
    def _log_summary(report: SyncReport) -> None:
        logger.info(
            "Movie sync %s: %s pages, %s dispatched, %s created, %s skipped, "
            "%s detail failures, %s write failures, %s errors",
            "aborted" if report.aborted else "finished",
            report.pages_fetched,
            report.dispatched,
            report.created,
            report.skipped,
            report.failed_details,
            report.failed_writes,
            report.errors,
        )

    def start_background_run(self) -> asyncio.Task[SyncReport | None]:
        """Launch :meth:`run` as a background task."""

        if self.is_running:
            raise SyncAlreadyRunningError("A sync run is already in progress")

        async def _runner() -> SyncReport | None:
            try:
                return await self.run()
            except Exception as exc:  # pragma: no cover - background safety net
                logger.exception("Background sync run failed: %s", exc)
                return None

        self._task = asyncio.create_task(_runner())
        return self._task

    async def stop(self) -> None:
        """Cancel a background run, if one is active."""

        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
