"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure the application package is importable when running tests without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import Settings  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


def build_settings(**overrides: Any) -> Settings:
    """Return a settings object with defaults suitable for tests."""

    base: dict[str, Any] = {
        "MOVIE_API_KEY": "tmdb-key",
        "WF_API_KEY": "webflow-token",
        "TMDB_API_URL": "https://tmdb.example.com/3",
        "WEBFLOW_API_URL": "https://webflow.example.com",
        "MAX_PAGE_COUNT": 3,
        "RATE_LIMIT_MIN_INTERVAL_MS": 0,
    }
    base.update(overrides)
    return Settings(_env_file=None, **base)  # type: ignore[arg-type]


@pytest.fixture
def make_settings():
    """Expose :func:`build_settings` to tests."""

    return build_settings
