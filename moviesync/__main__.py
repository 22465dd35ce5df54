"""Module executed when running ``python -m moviesync``."""

from __future__ import annotations

import asyncio
import logging
import sys

import uvicorn
from pydantic import ValidationError

from app.config import get_settings
from app.errors import MovieSyncError
from app.main import configure_logging, run_sync, seed_genres

logger = logging.getLogger("moviesync")


def main() -> int:
    """Dispatch on ``RUN_MODE``: one sync pass, genre seeding or the HTTP server."""

    try:
        settings = get_settings()
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    configure_logging(settings)

    if settings.run_mode == "server":
        uvicorn.run(
            "app.main:create_app",
            factory=True,
            host=settings.server_host,
            port=settings.server_port,
            reload=settings.environment == "development",
        )
        return 0

    runner = seed_genres if settings.run_mode == "seed-genres" else run_sync
    try:
        asyncio.run(runner(settings))
    except (MovieSyncError, ValueError) as exc:
        logger.error("%s run failed: %s", settings.run_mode, exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    sys.exit(main())
