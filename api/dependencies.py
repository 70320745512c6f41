"""
Shared FastAPI dependencies.

The entity store is selected by DATA_BACKEND. Tests replace `get_store` and
`get_clock` through `app.dependency_overrides`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache

from config.settings import BACKEND_SUPABASE, Settings, get_settings
from repositories.store import EntityStore


@lru_cache
def _default_store() -> EntityStore:
    settings = get_settings()

    if settings.data_backend == BACKEND_SUPABASE:
        from repositories.supabase_store import SupabaseStore

        return SupabaseStore()

    from scripts.seed_demo_data import build_demo_store

    return build_demo_store(seed=settings.demo_seed, policy=settings.order_policy)


def get_store() -> EntityStore:
    return _default_store()


def get_app_settings() -> Settings:
    return get_settings()


def get_clock() -> datetime:
    """Current UTC time, the `now` used for promotion windows and contact insights."""
    return datetime.now(timezone.utc)
