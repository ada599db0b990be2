"""
SQLite-backed settings store and fallback log sink.

Used for local development and tests when no hosted database is
configured.  Bracket rows live in ``trade_value_settings`` and are
returned in insertion order; fallback events are appended to
``calculation_fallback_logs``.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List

from .errors import SettingsStoreError

logger = logging.getLogger(__name__)

SETTINGS_COLUMNS = (
    "min_value",
    "max_value",
    "cash_percentage",
    "trade_percentage",
    "fixed_cash_value",
    "fixed_trade_value",
)


class SqliteStore:
    """Persistent store for bracket settings backed by SQLite."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        # Ensure the parent directory exists
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        """Create the database tables if they don't exist."""
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS trade_value_settings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    game TEXT NOT NULL,
                    min_value REAL,
                    max_value REAL,
                    cash_percentage REAL,
                    trade_percentage REAL,
                    fixed_cash_value REAL,
                    fixed_trade_value REAL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS calculation_fallback_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    game TEXT NOT NULL,
                    base_value REAL NOT NULL,
                    reason TEXT NOT NULL,
                    user_id TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def fetch_settings(self, game: str) -> List[Dict[str, Any]]:
        """Return every settings row for ``game`` in insertion order."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "SELECT * FROM trade_value_settings WHERE game=? ORDER BY id",
                    (game,),
                )
                return [dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as exc:
            logger.error("Failed to read settings for %s: %s", game, exc)
            raise SettingsStoreError(f"Failed to read settings for {game}: {exc}") from exc

    def replace_settings(self, game: str, rows: List[Dict[str, Any]]) -> None:
        """Delete all rows for ``game`` and insert ``rows`` in one transaction."""
        placeholders = ", ".join("?" for _ in SETTINGS_COLUMNS)
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM trade_value_settings WHERE game=?", (game,))
                conn.executemany(
                    f"INSERT INTO trade_value_settings (game, {', '.join(SETTINGS_COLUMNS)}) "
                    f"VALUES (?, {placeholders})",
                    [(game, *(row.get(col) for col in SETTINGS_COLUMNS)) for row in rows],
                )
                conn.commit()
        except sqlite3.Error as exc:
            logger.error("Failed to save settings for %s: %s", game, exc)
            raise SettingsStoreError(f"Failed to save settings for {game}: {exc}") from exc

    def insert_fallback_log(self, row: Dict[str, Any]) -> None:
        """Append a fallback log row."""
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO calculation_fallback_logs (game, base_value, reason, user_id, created_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        row["game"],
                        row["base_value"],
                        row["reason"],
                        row.get("user_id"),
                        row["created_at"],
                    ),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise SettingsStoreError(f"Failed to write fallback log: {exc}") from exc

    def fetch_fallback_logs(self) -> List[Dict[str, Any]]:
        """Return all fallback log rows, oldest first."""
        with self._connect() as conn:
            cursor = conn.execute("SELECT * FROM calculation_fallback_logs ORDER BY id")
            return [dict(row) for row in cursor.fetchall()]
