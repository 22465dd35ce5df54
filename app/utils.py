"""Utility helpers for the movie sync service."""

from __future__ import annotations

from datetime import date


def parse_release_year(value: str | None) -> int | None:
    """Return the calendar year of an ISO-8601 release date."""

    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10]).year
    except ValueError:
        return None


def truncate(text: str | None, limit: int = 300) -> str:
    """Shorten response bodies before they land in logs or exceptions."""

    if not text:
        return ""
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."
