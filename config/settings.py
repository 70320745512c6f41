"""
Application settings.

Values are read from the environment (a `.env` file at the project root is
loaded first, without overriding variables already set).

Environment variables:
- DATA_BACKEND: `memory` (demo data, default) or `supabase`
- SUPABASE_URL / SUPABASE_KEY: required when DATA_BACKEND=supabase
- ORDER_SHIPPING_FLAT_RATE: shipping charged below the free-shipping threshold (default 9.90)
- REVENUE_OBJECTIVE: monthly revenue objective shown on the dashboard (default 10000)
- DEMO_SEED: seed for the in-memory demo data (default 42)
- LOG_LEVEL: root log level (default INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from domain.order import OrderPricingPolicy

BACKEND_MEMORY = "memory"
BACKEND_SUPABASE = "supabase"

_ENV_PATH = Path(__file__).parent.parent / ".env"


def _decimal_env(env: Mapping[str, str], name: str, default: str) -> Decimal:
    raw = env.get(name, default)
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise RuntimeError(f"Invalid value for {name}: {raw!r} (expected a number)") from None


@dataclass(frozen=True, slots=True)
class Settings:
    data_backend: str = BACKEND_MEMORY
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    shipping_flat_rate: Decimal = Decimal("9.90")
    revenue_objective: Decimal = Decimal("10000")
    demo_seed: int = 42
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.data_backend not in (BACKEND_MEMORY, BACKEND_SUPABASE):
            raise RuntimeError(
                f"Invalid DATA_BACKEND: {self.data_backend!r}. "
                f"Use '{BACKEND_MEMORY}' or '{BACKEND_SUPABASE}'."
            )
        if self.data_backend == BACKEND_SUPABASE:
            if not self.supabase_url:
                raise RuntimeError(
                    "Missing environment variable: SUPABASE_URL. "
                    "Set SUPABASE_URL to your Supabase project URL."
                )
            if not self.supabase_key:
                raise RuntimeError(
                    "Missing environment variable: SUPABASE_KEY. "
                    "Set SUPABASE_KEY to your Supabase API key."
                )

    @property
    def order_policy(self) -> OrderPricingPolicy:
        return OrderPricingPolicy(shipping_flat_rate=self.shipping_flat_rate)

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from a mapping of environment variables (os.environ by default)."""

        env = os.environ if env is None else env
        seed = env.get("DEMO_SEED", "42")
        if not seed.isdigit():
            raise RuntimeError(f"Invalid value for DEMO_SEED: {seed!r} (expected an integer)")

        return Settings(
            data_backend=env.get("DATA_BACKEND", BACKEND_MEMORY).strip().lower(),
            supabase_url=env.get("SUPABASE_URL") or None,
            supabase_key=env.get("SUPABASE_KEY") or None,
            shipping_flat_rate=_decimal_env(env, "ORDER_SHIPPING_FLAT_RATE", "9.90"),
            revenue_objective=_decimal_env(env, "REVENUE_OBJECTIVE", "10000"),
            demo_seed=int(seed),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache
def get_settings() -> Settings:
    """Load `.env` once and return the process-wide settings."""

    load_dotenv(dotenv_path=_ENV_PATH)
    return Settings.from_env()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
