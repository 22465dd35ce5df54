"""Compatibility shim exposing the sync service entry points."""

from __future__ import annotations

from app.main import create_app, run_sync, seed_genres

__all__ = ["create_app", "run_sync", "seed_genres"]
