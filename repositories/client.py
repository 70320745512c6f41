"""
Supabase client initialization.

This module contains *only* the database connection setup. The client is
created lazily from settings so that importing repositories never requires
credentials (the demo backend runs without a database).

Environment variables required for the Supabase backend:
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client  # type: ignore[import-not-found]

from config.settings import get_settings


@lru_cache
def get_supabase() -> Client:
    """
    Return the process-wide Supabase client.

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_KEY is not configured
    """
    settings = get_settings()

    if not settings.supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not settings.supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(settings.supabase_url, settings.supabase_key)


__all__ = ["get_supabase"]
