"""
Construction of the process-wide service objects.

The settings cache must outlive individual requests, so the store,
cache, fallback logger and engine are built once per process and handed
to the API through :func:`get_services`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

from .cache import SettingsCache
from .fallback_logger import FallbackLogger
from .settings import Settings, get_settings
from .sqlite_store import SqliteStore
from .supabase_store import SupabaseStore
from .valuation import ValuationEngine

logger = logging.getLogger(__name__)

Store = Union[SqliteStore, SupabaseStore]


@dataclass
class Services:
    settings: Settings
    store: Store
    cache: SettingsCache
    fallback_logger: FallbackLogger
    engine: ValuationEngine


def create_store(settings: Settings) -> Store:
    """Instantiate the store backend selected by ``settings``."""
    backend = settings.resolved_backend()
    if backend == "supabase":
        logger.info("Using Supabase store at %s", settings.SUPABASE_URL)
        return SupabaseStore(settings)
    logger.info("Using SQLite store at %s", settings.SQLITE_DB)
    return SqliteStore(settings.SQLITE_DB)


def build_services(settings: Settings, store: Optional[Store] = None) -> Services:
    store = store if store is not None else create_store(settings)
    cache = SettingsCache(store)
    fallback_logger = FallbackLogger(store, max_workers=settings.FALLBACK_LOG_WORKERS)
    return Services(
        settings=settings,
        store=store,
        cache=cache,
        fallback_logger=fallback_logger,
        engine=ValuationEngine(cache, fallback_logger),
    )


@lru_cache(maxsize=1)
def get_services() -> Services:
    """Return the shared services, building them on first use."""
    return build_services(get_settings())
