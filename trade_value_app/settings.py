"""
Application configuration and environment variable parsing.

This module provides a lightweight configuration class that reads
environment variables and exposes typed attributes.  Defaults are
sensible for local development: without Supabase credentials the
service falls back to a local SQLite database.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class Settings:
    """Configuration values loaded from environment variables."""

    SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    SUPABASE_ANON_KEY: Optional[str] = os.getenv("SUPABASE_ANON_KEY")

    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "auto")
    SQLITE_DB: str = os.getenv("SQLITE_DB", "trade_values.db")
    HTTP_TIMEOUT: float = _env_float("HTTP_TIMEOUT", 10.0)

    FALLBACK_LOG_WORKERS: int = _env_int("FALLBACK_LOG_WORKERS", 2)

    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS", "http://localhost:5173,http://localhost:4173"
    )

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = _env_int("PORT", 8000)

    @property
    def supabase_key(self) -> Optional[str]:
        """Service role key if present, otherwise the anon key."""
        return self.SUPABASE_SERVICE_ROLE_KEY or self.SUPABASE_ANON_KEY

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def resolved_backend(self) -> str:
        """Return ``supabase`` or ``sqlite`` after resolving ``auto``."""
        backend = self.STORE_BACKEND.strip().lower()
        if backend == "auto":
            return "supabase" if self.SUPABASE_URL and self.supabase_key else "sqlite"
        if backend not in {"supabase", "sqlite"}:
            raise ValueError(f"Unknown store backend: {self.STORE_BACKEND}")
        return backend


def get_settings() -> Settings:
    """Factory function to create a new Settings instance.

    Using a function rather than a global instance ensures environment
    variables are read each time the settings are needed, which is
    useful for testing.
    """
    return Settings()
