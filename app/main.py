"""HTTP control surface and process wiring for the movie sync."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from fastapi import FastAPI, HTTPException

from .config import Settings, get_settings
from .errors import SyncAlreadyRunningError
from .services.genre_seeder import GenreSeeder
from .services.sync import MovieSyncService
from .services.tmdb import TMDBClient
from .services.webflow import WebflowClient

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def open_clients(
    settings: Settings,
) -> AsyncIterator[tuple[TMDBClient, WebflowClient]]:
    """Yield API clients backed by HTTP connections that close on exit."""

    async with AsyncExitStack() as exit_stack:
        tmdb_http = await exit_stack.enter_async_context(
            httpx.AsyncClient(
                base_url=str(settings.tmdb_api_url),
                timeout=httpx.Timeout(20.0, connect=10.0),
            )
        )
        webflow_http = await exit_stack.enter_async_context(
            httpx.AsyncClient(
                base_url=str(settings.webflow_api_url),
                timeout=httpx.Timeout(20.0, connect=10.0),
            )
        )
        yield TMDBClient(settings, tmdb_http), WebflowClient(settings, webflow_http)


async def run_sync(settings: Settings) -> None:
    async with open_clients(settings) as (tmdb, webflow):
        await MovieSyncService(settings, tmdb, webflow).run()


async def seed_genres(settings: Settings) -> None:
    async with open_clients(settings) as (tmdb, webflow):
        await GenreSeeder(settings, tmdb, webflow).seed()


def create_app(settings: Settings | None = None) -> FastAPI:
    resolved = settings or get_settings()

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        async with open_clients(resolved) as (tmdb, webflow):
            service = MovieSyncService(resolved, tmdb, webflow)
            fastapi_app.state.sync_service = service
            try:
                yield
            finally:  # pragma: no cover - teardown path exercised at runtime
                await service.stop()

    fastapi_app = FastAPI(
        title=resolved.app_name,
        description="Syncs TMDB movies into a Webflow CMS collection",
        version="1.0.0",
        lifespan=lifespan,
    )
    register_routes(fastapi_app)
    return fastapi_app


def get_sync_service(app: FastAPI) -> MovieSyncService:
    service = getattr(app.state, "sync_service", None)
    if not isinstance(service, MovieSyncService):
        raise RuntimeError("Sync service not initialised")
    return service


def _status_payload(service: MovieSyncService) -> dict[str, Any]:
    current = service.current_report
    last = service.last_report
    return {
        "running": service.is_running,
        "current": current.to_payload() if current else None,
        "last": last.to_payload() if last else None,
    }


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/sync")
    async def sync_status() -> dict[str, Any]:
        return _status_payload(get_sync_service(fastapi_app))

    @fastapi_app.post("/sync", status_code=202)
    async def trigger_sync() -> dict[str, Any]:
        service = get_sync_service(fastapi_app)
        try:
            service.start_background_run()
        except SyncAlreadyRunningError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        logger.info("Sync run requested over HTTP")
        return _status_payload(service)
