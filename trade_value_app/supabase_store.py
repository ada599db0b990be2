"""
Supabase REST settings store and fallback log sink.

This module talks to the PostgREST endpoints exposed by the hosted
Supabase project.  Bracket settings are read from and written to the
``trade_value_settings`` table; fallback events are appended to
``calculation_fallback_logs``.  Request failures are logged and raised
as :class:`SettingsStoreError` so that callers decide how to degrade.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .errors import SettingsStoreError
from .settings import Settings

logger = logging.getLogger(__name__)


class SupabaseStore:
    """Client for the ``trade_value_settings`` and ``calculation_fallback_logs`` tables."""

    SETTINGS_TABLE = "trade_value_settings"
    FALLBACK_LOG_TABLE = "calculation_fallback_logs"

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        if not settings.SUPABASE_URL or not settings.supabase_key:
            raise ValueError("Supabase URL and key must be configured")
        self.settings = settings
        self.base_url = settings.SUPABASE_URL.strip().rstrip("/") + "/rest/v1"
        self.session = session or requests.Session()

    def _build_headers(self) -> Dict[str, str]:
        key = self.settings.supabase_key
        return {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/{table}"

    def fetch_settings(self, game: str) -> List[Dict[str, Any]]:
        """Return every settings row whose ``game`` equals ``game``."""
        try:
            response = self.session.get(
                self._table_url(self.SETTINGS_TABLE),
                params={"select": "*", "game": f"eq.{game}"},
                headers=self._build_headers(),
                timeout=self.settings.HTTP_TIMEOUT,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Supabase settings query failed for %s: %s", game, exc)
            raise SettingsStoreError(f"Failed to read settings for {game}: {exc}") from exc
        return data or []

    def replace_settings(self, game: str, rows: List[Dict[str, Any]]) -> None:
        """Delete all rows for ``game`` then insert ``rows``."""
        headers = self._build_headers()
        try:
            response = self.session.delete(
                self._table_url(self.SETTINGS_TABLE),
                params={"game": f"eq.{game}"},
                headers=headers,
                timeout=self.settings.HTTP_TIMEOUT,
            )
            response.raise_for_status()
            if rows:
                response = self.session.post(
                    self._table_url(self.SETTINGS_TABLE),
                    json=[{**row, "game": game} for row in rows],
                    headers={**headers, "Prefer": "return=minimal"},
                    timeout=self.settings.HTTP_TIMEOUT,
                )
                response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Supabase settings save failed for %s: %s", game, exc)
            raise SettingsStoreError(f"Failed to save settings for {game}: {exc}") from exc

    def insert_fallback_log(self, row: Dict[str, Any]) -> None:
        """Append a fallback log row."""
        try:
            response = self.session.post(
                self._table_url(self.FALLBACK_LOG_TABLE),
                json=row,
                headers={**self._build_headers(), "Prefer": "return=minimal"},
                timeout=self.settings.HTTP_TIMEOUT,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SettingsStoreError(f"Failed to write fallback log: {exc}") from exc
