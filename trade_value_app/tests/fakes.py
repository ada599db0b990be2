"""In-memory fakes for the settings store and fallback logger."""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class FakeStore:
    """In-memory stand-in for the settings store and fallback log sink."""

    def __init__(self, rows_by_game: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> None:
        self.rows_by_game = rows_by_game or {}
        self.fetch_calls: List[str] = []
        self.logs: List[Dict[str, Any]] = []
        self.fail_reads = False

    def fetch_settings(self, game: str) -> List[Dict[str, Any]]:
        self.fetch_calls.append(game)
        if self.fail_reads:
            raise RuntimeError("connection refused")
        return [dict(row) for row in self.rows_by_game.get(game, [])]

    def replace_settings(self, game: str, rows: List[Dict[str, Any]]) -> None:
        self.rows_by_game[game] = [dict(row) for row in rows]

    def insert_fallback_log(self, row: Dict[str, Any]) -> None:
        self.logs.append(row)


class RecordingFallbackLogger:
    def __init__(self) -> None:
        self.events: List[tuple] = []

    def log_event(self, game, base_value, reason, user_id=None):
        self.events.append((game, base_value, reason, user_id))


def ranged(min_value, max_value, cash, trade) -> Dict[str, Any]:
    return {
        "min_value": min_value,
        "max_value": max_value,
        "cash_percentage": cash,
        "trade_percentage": trade,
        "fixed_cash_value": None,
        "fixed_trade_value": None,
    }


def fixed(cash, trade) -> Dict[str, Any]:
    return {
        "min_value": 0,
        "max_value": 0,
        "cash_percentage": 0,
        "trade_percentage": 0,
        "fixed_cash_value": cash,
        "fixed_trade_value": trade,
    }
